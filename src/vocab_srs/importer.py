"""Import word lists from various file formats."""
import csv
import io
import json
import logging
from pathlib import Path

from vocab_srs.progress import add_word

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
TEXT_SEPARATORS = ("\t", " - ", " = ", ";")


def _pair_from_mapping(entry: dict) -> dict | None:
    source = entry.get("source") or entry.get("source_text")
    target = entry.get("target") or entry.get("target_text")
    if not source or not target:
        return None
    return {"source": str(source).strip(), "target": str(target).strip(), "category": entry.get("category")}


def _pair_from_cells(cells: list[str]) -> dict | None:
    cells = [str(c).strip() for c in cells]
    if len(cells) < 2 or not cells[0] or not cells[1]:
        return None
    return {"source": cells[0], "target": cells[1], "category": cells[2] if len(cells) > 2 and cells[2] else None}


def _parse_structured(data) -> list[dict | None]:
    if isinstance(data, dict):
        if "words" not in data:
            logger.warning("No \"words\" list in structured file (keys: %s)", ", ".join(map(str, data)))
        data = data.get("words") or []
    if not isinstance(data, list):
        logger.warning("Expected a list of word pairs, got %s", type(data).__name__)
        return []
    pairs = []
    for entry in data:
        if isinstance(entry, dict):
            pairs.append(_pair_from_mapping(entry))
        elif isinstance(entry, str):
            pairs.extend(_parse_text(entry) or [None])
        elif isinstance(entry, (list, tuple)):
            pairs.append(_pair_from_cells(list(entry)))
        else:
            pairs.append(None)
    return pairs


def _parse_delimited(text: str, delimiter: str) -> list[dict | None]:
    rows = list(csv.reader(io.StringIO(text), delimiter=delimiter))
    if rows and [c.strip().lower() for c in rows[0][:2]] in (["source", "target"], ["source_text", "target_text"]):
        header = [c.strip().lower() for c in rows[0]]
        return [_pair_from_mapping(dict(zip(header, row))) for row in rows[1:]]
    return [_pair_from_cells(row) for row in rows if row]


def _parse_html(text: str) -> list[dict | None]:
    from bs4 import BeautifulSoup
    soup = BeautifulSoup(text, "html.parser")
    pairs = []
    for tr in soup.find_all("tr"):
        cells = [td.get_text() for td in tr.find_all("td")]
        if cells:
            pairs.append(_pair_from_cells(cells))
    return pairs


def _parse_text(text: str) -> list[dict | None]:
    pairs = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        for sep in TEXT_SEPARATORS:
            if sep in line:
                pairs.append(_pair_from_cells(line.split(sep, 1)))
                break
        else:
            pairs.append(None)
    return pairs


def read_word_pairs(file_path: str) -> list[dict]:
    """Parse a file into word pairs. Rows missing either side are dropped."""
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(file_path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if suffix == ".json":
        pairs = _parse_structured(json.loads(text))
    elif suffix in (".yaml", ".yml"):
        import yaml
        pairs = _parse_structured(yaml.safe_load(text) or [])
    elif suffix == ".csv":
        pairs = _parse_delimited(text, ",")
    elif suffix == ".tsv":
        pairs = _parse_delimited(text, "\t")
    elif suffix in (".html", ".htm"):
        pairs = _parse_html(text)
    else:
        pairs = _parse_text(text)

    skipped = sum(1 for p in pairs if p is None)
    if skipped:
        logger.warning("Skipped %d incomplete rows in %s", skipped, path.name)
    return [p for p in pairs if p is not None]


def import_file(db_path: str, file_path: str, category: str | None = None) -> dict:
    """Import word pairs into the catalog. Rows without a category get ``category`` or General."""
    pairs = read_word_pairs(file_path)
    added = 0
    for pair in pairs:
        word_category = pair["category"] or category or DEFAULT_CATEGORY
        if add_word(db_path, pair["source"], pair["target"], word_category) is not None:
            added += 1
    logger.info("Imported %d of %d words from %s", added, len(pairs), Path(file_path).name)
    return {"filename": Path(file_path).name, "parsed": len(pairs), "added": added, "duplicates": len(pairs) - added}
