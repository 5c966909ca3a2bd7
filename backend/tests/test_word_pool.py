import pytest

from typetrainer.services.typing.word_pool import WordItem, load, load_file, loads


@pytest.mark.parametrize('raw', [None, 42, 'cat', {'word': 'cat'}, 3.5, True])
def test_non_list_input_yields_empty_pool(raw):
    assert load(raw) == []


def test_load_filters_and_normalizes_entries():
    raw = [
        {'word': 'cat', 'meaning': 'a pet'},
        {'word': 'dog'},
        {'word': 'owl', 'meaning': 7},
        {'word': 12, 'meaning': 'not a string word'},
        {'meaning': 'missing word'},
        {'word': ''},
        'plain string',
        None,
        ['word', 'cat'],
    ]
    pool = load(raw)
    assert pool == [
        WordItem('cat', 'a pet'),
        WordItem('dog', ''),
        WordItem('owl', ''),
    ]
    # every entry has a non-empty word and a string meaning
    assert all(item.word and isinstance(item.meaning, str) for item in pool)


def test_word_item_is_immutable():
    item = WordItem('cat', 'a pet')
    with pytest.raises(Exception):
        item.word = 'dog'


def test_loads_invalid_json_yields_empty_pool():
    assert loads('{not json') == []
    assert loads('') == []
    assert loads(None) == []


def test_loads_parses_json_list():
    pool = loads('[{"word": "sun", "meaning": "star"}, {"word": "moon"}]')
    assert [item.word for item in pool] == ['sun', 'moon']
    assert pool[1].meaning == ''


def test_load_file_missing_path_yields_empty_pool(tmp_path):
    assert load_file(tmp_path / 'nope.json') == []


def test_load_file_reads_utf8(tmp_path):
    path = tmp_path / 'words.json'
    path.write_text('[{"word": "café", "meaning": "coffee shop"}]', encoding='utf-8')
    assert load_file(path) == [WordItem('café', 'coffee shop')]
