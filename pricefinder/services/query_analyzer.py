import re

from pricefinder.registries import Registries, default_registries
from pricefinder.schemas.query import QueryAttributes

CAPACITY_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*-?\s*"
    r"(cu\.?\s*ft\.?|cubic\s+f(?:ee|oo)t|gal(?:lon)?s?\.?|qt\.?|quarts?|fl\.?\s*oz\.?|oz\.?|ounces?"
    r"|liters?|litres?|l)(?![a-z])",
    re.IGNORECASE,
)
SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:\"|”|''|-?\s*in(?:ch(?:es)?)?\b\.?)", re.IGNORECASE)
DIMENSIONS_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*(?:\"|in\.?)?\s*[x×]\s*(\d+(?:\.\d+)?)(?:\s*(?:\"|in\.?)?\s*[x×]\s*(\d+(?:\.\d+)?))?",
    re.IGNORECASE,
)
BED_SIZE_RE = re.compile(r"\b(california king|twin xl|twin|full|queen|king)\b", re.IGNORECASE)
PACK_RES = (
    re.compile(r"\bset\s+of\s+(\d+)\b", re.IGNORECASE),
    re.compile(r"\bpack\s+of\s+(\d+)\b", re.IGNORECASE),
    re.compile(r"\bcase\s+of\s+(\d+)\b", re.IGNORECASE),
    re.compile(r"\b(\d+)\s*-?\s*(?:pack|pk|pcs|count|ct)\b", re.IGNORECASE),
)
TOKEN_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9-]*[A-Za-z0-9]")
UNIT_TOKEN_RE = re.compile(
    r"\d+(?:\.\d+)?(?:qt|qts|oz|gal|in|inch|ft|cu|cuft|pk|pack|ct|l|lb|lbs|w|v|mah|gb|tb|mm|cm|hp"
    r"|pc|pcs|piece|count|quart|gallon|liter|watt|volt|mo|k|th|st|nd|rd|s)?",
)
WORD_RE = re.compile(r"[a-z0-9]+")

BED_TYPES = {"mattress", "bed frame", "headboard", "comforter", "sheet set", "pillow"}
STOPWORDS = {
    "a", "an", "the", "and", "or", "with", "for", "of", "in", "on", "to", "by", "new",
    "generic", "item", "unit", "product", "brand", "unknown", "basic", "standard",
    "regular", "misc", "assorted", "size", "type", "model", "color", "style",
}
UNIT_NAMES = {
    "cu": "cu_ft", "cubic": "cu_ft", "gal": "gal", "qt": "qt", "quart": "qt",
    "fl": "oz", "oz": "oz", "ounce": "oz", "liter": "l", "litre": "l", "l": "l",
}


def canonical_query(text: str, max_length: int = 200) -> str:
    """Lowercase, strip punctuation, collapse whitespace and cap the length."""
    text = re.sub(r"[^\w\s]", " ", (text or "").lower())
    text = re.sub(r"\s+", " ", text).strip()
    return text[:max_length].strip()


def parse_pack_size(text: str) -> int:
    for pattern in PACK_RES:
        match = pattern.search(text or "")
        if match:
            count = int(match.group(1))
            if 2 <= count <= 100:
                return count
    return 1


def parse_capacity(text: str) -> tuple[str, float, str] | None:
    match = CAPACITY_RE.search(text or "")
    if not match:
        return None
    raw_unit = match.group(2).lower()
    unit = None
    for prefix, name in UNIT_NAMES.items():
        if raw_unit.startswith(prefix):
            unit = name
            break
    if unit is None:
        return None
    return match.group(0).strip(), float(match.group(1)), unit


def parse_size(text: str) -> tuple[str, float, str] | None:
    """Inch size or the largest dimension of an AxB(xC) expression."""
    text = text or ""
    dims = DIMENSIONS_RE.search(text)
    if dims:
        values = [float(v) for v in dims.groups() if v]
        return dims.group(0).strip(), max(values), "in"
    match = SIZE_RE.search(text)
    if match:
        return match.group(0).strip(), float(match.group(1)), "in"
    return None


def capacity_class(value: float | None, unit: str | None, classes: dict) -> str | None:
    if value is None or unit not in classes:
        return None
    for upper, name in classes[unit]:
        if value < upper:
            return name
    return None


def brand_key(brand: str) -> str:
    return re.sub(r"[^a-z0-9]", "", brand.lower())


class QueryAnalyzer:
    """Turns a free-text description into structured attributes. Holds only compiled tables."""

    def __init__(self, registries: Registries | None = None):
        self.registries = registries or default_registries()
        reg = self.registries
        self._typos = [
            (re.compile(rf"(?<![a-z0-9]){re.escape(k)}(?![a-z0-9])"), v)
            for k, v in sorted(reg.brand_typos.items(), key=lambda kv: -len(kv[0]))
        ]
        self._brands = [
            (re.compile(rf"(?<![a-z0-9]){re.escape(b.lower())}(?![a-z0-9])"), b) for b in reg.brands
        ]
        self._types = [
            (re.compile(rf"(?<![a-z]){re.escape(t)}(?:e?s)?(?![a-z])"), t)
            for t in sorted(reg.product_types, key=len, reverse=True)
        ]
        self._materials = self._keyword_patterns(reg.materials)
        self._colors = self._keyword_patterns(reg.colors)
        self._finishes = self._keyword_patterns(reg.finishes)

    @staticmethod
    def _keyword_patterns(words) -> list[tuple[re.Pattern, str]]:
        return [
            (re.compile(rf"(?<![a-z]){re.escape(w)}(?![a-z])"), w)
            for w in sorted(words, key=len, reverse=True)
        ]

    def normalize(self, text: str) -> str:
        lowered = re.sub(r"\s+", " ", (text or "").lower()).strip()
        for pattern, replacement in self._typos:
            lowered = pattern.sub(replacement, lowered)
        return lowered

    def find_brand(self, text: str) -> str | None:
        """Longest brand match; short brands right after a number ("5 hp") are units, not brands."""
        lowered = self.normalize(text)
        best: tuple[int, int, str] | None = None
        for pattern, brand in self._brands:
            for match in pattern.finditer(lowered):
                if len(brand) <= 3 and re.search(r"\d\s*$", lowered[: match.start()]):
                    continue
                key = (-len(brand), match.start(), brand)
                if best is None or key < best:
                    best = key
                break
        return best[2] if best else None

    def find_brands(self, text: str) -> set[str]:
        lowered = self.normalize(text)
        found = set()
        for pattern, brand in self._brands:
            match = pattern.search(lowered)
            if match and not (len(brand) <= 3 and re.search(r"\d\s*$", lowered[: match.start()])):
                found.add(brand_key(brand))
        # "ge appliances" also contains "ge"; keep only the longest overlapping keys
        return {b for b in found if not any(o != b and o.startswith(b) for o in found)}

    def find_product_type(self, text: str) -> str | None:
        lowered = self.normalize(text)
        for pattern, product_type in self._types:
            if pattern.search(lowered):
                return product_type
        return None

    @staticmethod
    def _first(patterns, lowered: str) -> str | None:
        for pattern, word in patterns:
            if pattern.search(lowered):
                return word
        return None

    def analyze(self, text: str) -> QueryAttributes:
        lowered = self.normalize(text)
        attrs = QueryAttributes()

        attrs.brand = self.find_brand(text)
        attrs.product_type = self.find_product_type(text)
        if attrs.product_type:
            attrs.category, attrs.subcategory = self.registries.product_types[attrs.product_type]

        capacity = parse_capacity(lowered)
        if capacity:
            attrs.capacity_raw, attrs.capacity_value, attrs.capacity_unit = capacity

        size = parse_size(lowered)
        if size:
            attrs.size_raw, attrs.size_value, attrs.size_unit = size
        elif attrs.product_type in BED_TYPES:
            bed = BED_SIZE_RE.search(lowered)
            if bed:
                attrs.size_raw = bed.group(1)
                attrs.size_unit = bed.group(1)

        attrs.material = self._first(self._materials, lowered)
        attrs.color = self._first(self._colors, lowered)
        attrs.finish = self._first(self._finishes, lowered)
        attrs.spec_tokens = self.spec_tokens(text)
        attrs.pack_count = parse_pack_size(lowered)
        attrs.significant_words = [
            w for w in WORD_RE.findall(lowered) if w not in STOPWORDS and len(w) > 1
        ]
        return attrs

    @staticmethod
    def spec_tokens(text: str) -> list[str]:
        """Model-number-like codes: letters and digits mixed, at least four characters."""
        tokens: list[str] = []
        for token in TOKEN_RE.findall(text or ""):
            compact = token.replace("-", "")
            if len(compact) < 4:
                continue
            if not (re.search(r"\d", compact) and re.search(r"[A-Za-z]", compact)):
                continue
            lowered = compact.lower()
            if UNIT_TOKEN_RE.fullmatch(lowered) or re.fullmatch(r"\d+x\d+(?:x\d+)?", lowered):
                continue
            upper = token.upper()
            if upper not in tokens:
                tokens.append(upper)
        return tokens


def analyze_query(text: str, registries: Registries | None = None) -> QueryAttributes:
    """One-off analysis; long-lived callers keep their own `QueryAnalyzer`."""
    return QueryAnalyzer(registries).analyze(text)
