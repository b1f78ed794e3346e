# tests/test_importer.py
import logging

import pytest

from vocab_srs.db import init_db
from vocab_srs.importer import import_file, read_word_pairs
from vocab_srs.progress import load_catalog


def test_read_txt_file(tmp_path):
    f = tmp_path / "words.txt"
    f.write_text("# kitchen\nforchetta - вилка\ncoltello\tнож\n\nnonsense line\n", encoding="utf-8")
    pairs = read_word_pairs(str(f))
    assert [(p["source"], p["target"]) for p in pairs] == [("forchetta", "вилка"), ("coltello", "нож")]


def test_read_json_file(tmp_path):
    f = tmp_path / "words.json"
    f.write_text('{"words": [{"source": "gatto", "target": "кот", "category": "Animals"}, {"source": "cane"}]}',
                 encoding="utf-8")
    assert read_word_pairs(str(f)) == [{"source": "gatto", "target": "кот", "category": "Animals"}]


def test_read_yaml_file(tmp_path):
    f = tmp_path / "words.yaml"
    f.write_text("- source: rosso\n  target: красный\n  category: Colors\n- [blu, синий]\n", encoding="utf-8")
    pairs = read_word_pairs(str(f))
    assert [(p["source"], p["target"], p["category"]) for p in pairs] == [
        ("rosso", "красный", "Colors"), ("blu", "синий", None),
    ]


def test_read_csv_with_header(tmp_path):
    f = tmp_path / "words.csv"
    f.write_text("source,target,category\nmare,море,Nature\nsole,солнце,\n", encoding="utf-8")
    pairs = read_word_pairs(str(f))
    assert pairs[0] == {"source": "mare", "target": "море", "category": "Nature"}
    assert pairs[1]["category"] == ""


def test_read_tsv_without_header(tmp_path):
    f = tmp_path / "words.tsv"
    f.write_text("luna\tлуна\tNature\n", encoding="utf-8")
    assert read_word_pairs(str(f)) == [{"source": "luna", "target": "луна", "category": "Nature"}]


def test_read_html_table(tmp_path):
    f = tmp_path / "words.html"
    f.write_text(
        "<table><tr><th>IT</th><th>RU</th></tr>"
        "<tr><td>libro</td><td>книга</td></tr>"
        "<tr><td>penna</td><td>ручка</td><td>School</td></tr></table>",
        encoding="utf-8",
    )
    pairs = read_word_pairs(str(f))
    assert [(p["source"], p["category"]) for p in pairs] == [("libro", None), ("penna", "School")]


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_word_pairs(str(tmp_path / "nope.csv"))


def test_import_file(tmp_path, tmp_db):
    init_db(tmp_db)
    f = tmp_path / "words.csv"
    f.write_text("mare,море,Nature\nsole,солнце\nmare,море,Nature\n", encoding="utf-8")
    result = import_file(tmp_db, str(f), category="Summer")
    assert result == {"filename": "words.csv", "parsed": 3, "added": 2, "duplicates": 1}
    catalog = load_catalog(tmp_db)
    assert [(i.source_text, i.category) for i in catalog] == [("mare", "Nature"), ("sole", "Summer")]


def test_import_file_defaults_to_general(tmp_path, tmp_db):
    init_db(tmp_db)
    f = tmp_path / "words.txt"
    f.write_text("notte = ночь\n", encoding="utf-8")
    import_file(tmp_db, str(f))
    assert load_catalog(tmp_db)[0].category == "General"


def test_read_json_list_of_text_lines(tmp_path):
    f = tmp_path / "words.json"
    f.write_text('["ciao - привет", "grazie = спасибо", "ciao"]', encoding="utf-8")
    pairs = read_word_pairs(str(f))
    assert [(p["source"], p["target"]) for p in pairs] == [("ciao", "привет"), ("grazie", "спасибо")]


def test_read_json_without_words_key_warns(tmp_path, caplog):
    f = tmp_path / "words.json"
    f.write_text('{"vocabulary": [{"source": "gatto", "target": "кот"}]}', encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="vocab_srs.importer"):
        assert read_word_pairs(str(f)) == []
    assert '"words"' in caplog.text
    assert "vocabulary" in caplog.text


def test_read_yaml_scalar_is_empty(tmp_path, caplog):
    f = tmp_path / "words.yaml"
    f.write_text("just a sentence\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="vocab_srs.importer"):
        assert read_word_pairs(str(f)) == []
    assert "Expected a list" in caplog.text
