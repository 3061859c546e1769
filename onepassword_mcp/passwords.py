"""Password and passphrase generation.

Every draw goes through ``secrets.randbelow``, which rejection-samples the
OS CSPRNG, so indices are uniform over ``[0, n)`` with no modulo bias.
"""
import secrets
from typing import Dict, List, Tuple

from .errors import InvalidArgument

LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"
SYMBOLS = "!@#$%^&*()-_=+[]{}|;:,.<>?"
SUFFIX_SYMBOLS = "!@#$%^&*"

MIN_WORDS = 2
MAX_WORDS = 10
NUMBER_SUFFIX_BOUND = 100


def build_charset(include_uppercase: bool = False, include_numbers: bool = False, include_symbols: bool = False) -> str:
    charset = LOWERCASE
    if include_uppercase:
        charset += UPPERCASE
    if include_numbers:
        charset += DIGITS
    if include_symbols:
        charset += SYMBOLS
    return charset


def generate_password(length: int, charset: str) -> str:
    """Draw ``length`` characters independently and uniformly from ``charset``."""
    if length < 1:
        raise InvalidArgument(f"length must be at least 1, got {length}")
    if not charset:
        raise InvalidArgument("charset must not be empty")
    n = len(charset)
    return "".join(charset[secrets.randbelow(n)] for _ in range(length))


WORD_LISTS: Dict[str, Tuple[str, ...]] = {
    "nouns": (
        "apple", "bird", "cloud", "desk", "eagle", "flute", "grape", "hill",
        "iron", "joke", "kite", "leaf", "mountain", "night", "ocean", "piano",
        "quilt", "river", "stone", "tree", "wolf", "zebra", "anchor", "bridge",
        "castle", "dragon", "ember", "falcon", "garden", "harbor", "island",
        "jungle", "lantern", "meadow", "nebula", "orchid", "phoenix", "quasar",
        "rocket", "sunset", "temple", "umbrella", "valley", "whisper", "atlas",
        "beacon", "comet", "dagger", "fossil", "glacier", "helmet", "ivory",
        "javelin", "keystone", "lotus", "marble", "nucleus", "obelisk", "prism",
        "riddle", "scepter", "timber", "vortex", "willow", "zenith", "breeze",
        "canyon", "pebble", "crystal", "mirror", "shadow", "spark", "torch",
        "blaze", "frost", "coral", "pearl", "raven", "cedar", "maple", "birch",
        "aspen", "olive", "basil", "sage", "mint", "clover", "fern", "moss",
        "reed", "thorn", "bloom", "petal", "acorn", "shell", "drift", "flare",
    ),
    "verbs": (
        "bake", "cook", "draw", "eat", "find", "give", "help", "jump",
        "keep", "love", "make", "note", "open", "play", "quit", "read",
        "sing", "talk", "view", "walk", "dash", "glow", "hint", "join",
        "knit", "leap", "mend", "nest", "pick", "roam", "sail", "tick",
        "wade", "yawn", "zoom", "blend", "carve", "drift", "forge", "grind",
        "hover", "ignite", "kindle", "latch", "merge", "nudge", "orbit",
        "plunge", "quest", "rally", "scout", "trace", "unveil", "weave",
        "clasp", "delve", "fling", "grasp", "hoist", "sway", "twirl",
        "swoop", "cling", "creep", "prowl", "steer", "sweep", "whirl",
        "climb", "bloom", "chase", "dream", "float", "gleam", "march",
        "pause", "reach", "shine", "soar", "spark", "stand", "surge",
        "think", "trust", "build", "craft", "guard", "plant", "share",
    ),
    "adjectives": (
        "amber", "blue", "cyan", "dark", "emerald", "forest", "gold", "hazel",
        "ivory", "jade", "keen", "lime", "mauve", "navy", "olive", "pink",
        "quartz", "red", "silver", "teal", "violet", "white", "yellow", "azure",
        "bronze", "bright", "calm", "deep", "eager", "fair", "grand", "hardy",
        "jolly", "kind", "lofty", "merry", "noble", "proud", "quiet", "rapid",
        "sharp", "swift", "tall", "vast", "warm", "bold", "brave", "clear",
        "crisp", "deft", "fresh", "glad", "hale", "just", "live", "neat",
        "pure", "rare", "safe", "true", "wild", "wise", "young", "zesty",
        "agile", "blunt", "dense", "firm", "giant", "harsh", "ideal", "lucid",
        "minor", "polar", "rigid", "sleek", "thick", "vivid", "wiry", "stark",
        "brief", "chief", "prime", "royal", "solar", "urban", "vital", "civic",
        "coral", "dusty", "early", "fiery", "gusty", "icy", "lunar", "misty",
    ),
    "places": (
        "alaska", "arizona", "austin", "berlin", "boston", "cairo", "dallas",
        "denver", "dublin", "geneva", "havana", "houston", "jersey", "lagos",
        "lisbon", "london", "madrid", "miami", "milan", "munich", "naples",
        "oslo", "paris", "perth", "phoenix", "portland", "prague", "rome",
        "salem", "seattle", "sofia", "sydney", "tampa", "tokyo", "tulsa",
        "venice", "vienna", "zurich", "athens", "boise", "charlotte", "durham",
        "eugene", "fresno", "helena", "jackson", "kansas", "lincoln", "memphis",
        "norfolk", "oakland", "quincy", "raleigh", "sacramento", "tacoma",
        "utah", "vernon", "wichita", "albany", "canton", "dayton", "elmira",
        "fargo", "gary", "irvine", "jersey", "kenosha", "laredo", "macon",
    ),
    "nature": (
        "aurora", "avalanche", "bamboo", "blizzard", "breeze", "brook",
        "cascade", "cavern", "clover", "coral", "crater", "current", "delta",
        "desert", "dune", "eclipse", "estuary", "fjord", "flora", "geyser",
        "gorge", "grove", "harbor", "horizon", "lagoon", "lava", "meadow",
        "monsoon", "nebula", "oasis", "peak", "plateau", "prairie", "quartz",
        "rapids", "reef", "ridge", "savanna", "summit", "tempest", "thunder",
        "tundra", "typhoon", "volcano", "wetland", "zephyr", "alpine", "arctic",
        "basin", "canyon", "cliff", "coast", "cove", "creek", "field",
        "forest", "frost", "marsh", "mist", "pond", "rain", "shore",
        "storm", "stream", "swamp", "tide", "trail", "wave", "woods",
    ),
}

_CORPUS_ORDER = ("nouns", "verbs", "adjectives", "places", "nature")


def _build_corpus() -> Tuple[str, ...]:
    # dict.fromkeys keeps first-occurrence order
    combined = [word for name in _CORPUS_ORDER for word in WORD_LISTS[name]]
    return tuple(dict.fromkeys(combined))


WORD_CORPUS: Tuple[str, ...] = _build_corpus()


def get_all_words() -> List[str]:
    return list(WORD_CORPUS)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def generate_memorable_password(
    word_count: int = 3,
    separator: str = "-",
    include_number: bool = True,
    include_symbol: bool = True,
    capitalize: bool = True,
) -> str:
    """Build a passphrase from ``word_count`` corpus words drawn with replacement.

    The number and symbol suffixes are appended directly after the last word,
    without ``separator`` between them.
    """
    if word_count < MIN_WORDS or word_count > MAX_WORDS:
        raise InvalidArgument(f"word_count must be between {MIN_WORDS} and {MAX_WORDS}, got {word_count}")
    n = len(WORD_CORPUS)
    words = []
    for _ in range(word_count):
        word = WORD_CORPUS[secrets.randbelow(n)]
        words.append(_capitalize(word) if capitalize else word)
    password = separator.join(words)
    if include_number:
        password += str(secrets.randbelow(NUMBER_SUFFIX_BOUND))
    if include_symbol:
        password += SUFFIX_SYMBOLS[secrets.randbelow(len(SUFFIX_SYMBOLS))]
    return password
