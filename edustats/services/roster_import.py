"""Student roster import from PDF or text class lists."""

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from edustats.core.exceptions import BusinessRuleError

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.7
SIMILARITY_THRESHOLD = 0.8

STOP_WORDS = frozenset(
    word.lower()
    for word in (
        "classe", "élève", "élèves", "liste", "école", "primaire",
        "année", "scolaire", "académique", "enseignant", "professeur",
        "CP1", "CP2", "CE1", "CE2", "CM1", "CM2", "effectif", "total",
        "garçon", "garçons", "fille", "filles", "né", "née", "le",
        "adresse", "téléphone", "parents", "responsable", "contact",
        "date", "naissance", "lieu", "page", "numéro", "janvier",
        "février", "mars", "avril", "mai", "juin", "juillet",
        "août", "septembre", "octobre", "novembre", "décembre",
    )
)

HEADER_KEYWORDS = (
    "école", "établissement", "académie", "inspection",
    "directeur", "enseignant", "professeur",
    "année scolaire", "classe de", "niveau",
    "adresse", "téléphone", "email", "fax",
    "page", "total", "effectif",
)

# (pattern, last name first)
NAME_PATTERNS = (
    (re.compile(r"^\d+[.)]?\s*(\w[\w'-]*)\s+(\w[\w'-]*)"), False),
    (re.compile(r"(\w[\w'-]*),\s*(\w[\w'-]*)\s*\("), True),
    (re.compile(r"(\w[\w'-]*),\s*(\w[\w'-]*)"), True),
    (re.compile(r"(\w[\w'-]*)\s+(\w[\w'-]*)\s+\d{2}[/.-]\d{2}[/.-]\d{4}"), False),
    (re.compile(r"([A-ZÀ-Ÿ]{2,})\s+([A-ZÀ-Ÿ][a-zà-ÿ]+)"), False),
    (re.compile(r"(\w[\w']*)\s+-\s+(\w[\w']*)"), False),
    (re.compile(r"(\w[\w'-]*)\s+(\w[\w'-]*)"), False),
)

DATE_PATTERN = re.compile(r"\b(\d{2})[/.-](\d{2})[/.-](\d{4})\b")
_UNWANTED = re.compile(r"[^\w\s\-',./()]")
_CONTROL = re.compile(r"[\x00-\x1f\x7f]")
_LETTERS = re.compile(r"[^\W\d_]")


@dataclass
class ParsedName:
    first_name: str
    last_name: str
    confidence: float
    original_text: str
    line_number: int
    birth_date: date | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class ParseResult:
    total_processed: int = 0
    students: list[ParsedName] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    duplicate_count: int = 0


# ============== Text cleaning ==============


def clean_line(line: str) -> str:
    """Strip control characters and symbols, collapse spaces."""
    line = _CONTROL.sub("", line)
    line = _UNWANTED.sub(" ", line)
    return " ".join(line.split())


def is_relevant_line(line: str) -> bool:
    """Whether a line probably holds a student's name."""
    if len(line) < 3 or len(line) > 100:
        return False

    words = line.lower().split()
    if all(word in STOP_WORDS or word.isdigit() or len(word) < 2 for word in words):
        return False

    lowered = line.lower()
    if any(keyword in lowered for keyword in HEADER_KEYWORDS):
        return False

    candidates = [
        word for word in words
        if len(word) >= 2 and _LETTERS.sub("", word) == "" and word not in STOP_WORDS
    ]
    return len(candidates) >= 2


def normalize_name(name: str) -> str:
    """Capitalize each part of a name, hyphens and apostrophes included."""
    name = name.strip().lower()
    return re.sub(r"(^|[\s'-])(\w)", lambda m: m.group(1) + m.group(2).upper(), name)


def is_valid_name(name: str) -> bool:
    if not name or len(name) < 2 or len(name) > 50:
        return False
    if not _LETTERS.search(name):
        return False
    if name.isdigit():
        return False
    specials = sum(1 for char in name if not (char.isalpha() or char in " -'"))
    if specials > len(name) * 0.3:
        return False
    return name.lower() not in STOP_WORDS


def extract_birth_date(text: str) -> date | None:
    """First plausible DD/MM/YYYY date of a line."""
    for day, month, year in DATE_PATTERN.findall(text):
        try:
            value = date(int(year), int(month), int(day))
        except ValueError:
            continue
        if 2000 <= value.year <= date.today().year:
            return value
    return None


def name_confidence(original_text: str, first_name: str, last_name: str) -> float:
    """Heuristic score between 0 and 1 that a match is a real student name."""
    score = 0.5
    if is_valid_name(first_name):
        score += 0.2
    if is_valid_name(last_name):
        score += 0.2
    if 3 <= len(first_name) <= 15:
        score += 0.1
    if 3 <= len(last_name) <= 15:
        score += 0.1

    specials = sum(1 for char in original_text if not (char.isalpha() or char.isspace()))
    if original_text and specials / len(original_text) > 0.3:
        score -= 0.2

    if re.match(r"^\d+\.", original_text.strip()):
        score += 0.1
    if DATE_PATTERN.search(original_text):
        score += 0.1

    return round(max(0.0, min(1.0, score)), 2)


# ============== Similarity ==============


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """1 for identical strings, 0 for nothing in common."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest


def are_similar(first: ParsedName, second: ParsedName) -> bool:
    return (
        similarity(first.first_name.lower(), second.first_name.lower()) > SIMILARITY_THRESHOLD
        and similarity(first.last_name.lower(), second.last_name.lower()) > SIMILARITY_THRESHOLD
    )


def matches_existing(candidate: ParsedName, existing_names: list[str]) -> bool:
    """Whether a detected name is already on the class roster."""
    wanted = candidate.full_name.lower()
    reversed_name = f"{candidate.last_name} {candidate.first_name}".lower()
    return any(
        similarity(wanted, name.lower()) > SIMILARITY_THRESHOLD
        or similarity(reversed_name, name.lower()) > SIMILARITY_THRESHOLD
        for name in existing_names
    )


# ============== Parsing ==============


def parse_line(line: str, line_number: int) -> ParsedName | None:
    """Best name match of a line, if any pattern yields a valid one."""
    for pattern, last_first in NAME_PATTERNS:
        match = pattern.search(line)
        if match is None:
            continue
        first, second = match.group(1), match.group(2)
        if last_first:
            first, second = second, first
        first_name, last_name = normalize_name(first), normalize_name(second)
        if not (is_valid_name(first_name) and is_valid_name(last_name)):
            continue
        return ParsedName(
            first_name=first_name,
            last_name=last_name,
            confidence=name_confidence(match.group(0), first_name, last_name),
            original_text=line,
            line_number=line_number,
            birth_date=extract_birth_date(line),
        )
    return None


def parse_student_names(text: str) -> ParseResult:
    """
    Detect student names in the text of a class list.

    Matches under the confidence threshold are dropped and near-identical
    names are kept once.
    """
    result = ParseResult()
    lines = [clean_line(line) for line in text.splitlines()]
    relevant = [(number, line) for number, line in enumerate(lines, start=1) if is_relevant_line(line)]
    result.total_processed = len(relevant)

    for number, line in relevant:
        parsed = parse_line(line, number)
        if parsed is None:
            result.errors.append(
                {"row": number, "original_text": line, "error": "No name found on this line"}
            )
            continue
        if parsed.confidence < CONFIDENCE_THRESHOLD:
            result.errors.append(
                {"row": number, "original_text": line, "error": "Name detected with low confidence"}
            )
            continue
        if any(are_similar(parsed, kept) for kept in result.students):
            logger.debug("Duplicate name skipped: %s", parsed.full_name)
            result.duplicate_count += 1
            continue
        result.students.append(parsed)

    logger.info(
        "Parsed %d names from %d relevant lines", len(result.students), result.total_processed
    )
    return result


def extract_text(content: bytes, content_type: str | None) -> str:
    """Text of an uploaded PDF or plain-text class list."""
    if content_type == "application/pdf" or content.startswith(b"%PDF"):
        # pypdf also fails with plain lookup and value errors on damaged files
        try:
            reader = PdfReader(io.BytesIO(content))
            return "\n".join(page.extract_text() or "" for page in reader.pages)
        except (PyPdfError, ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            raise BusinessRuleError(f"Unreadable PDF file: {exc}")

    if content_type and not content_type.startswith("text/"):
        raise BusinessRuleError("Only PDF and plain text files can be imported")

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.decode("latin-1")
