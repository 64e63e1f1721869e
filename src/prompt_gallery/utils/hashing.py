"""
Short numeric anchors for catalog sections.

Anchors only address expand/collapse targets; they carry no identity, so a
cheap 32-bit string hash is enough. Collisions are resolved by the allocator.
"""


def _to_int32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_code(text: str) -> int:
    """
    Hash a string to a signed 32-bit integer.

    Iterates UTF-16 code units, computing ``hash * 31 + code`` at every step
    and truncating to 32 bits. The empty string hashes to 0.

    Args:
        text: Any string

    Returns:
        Deterministic signed 32-bit hash
    """
    result = 0
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(encoded), 2):
        code = encoded[i] | (encoded[i + 1] << 8)
        result = _to_int32(result * 31 + code)
    return result


class AnchorAllocator:
    """Hands out catalog anchors that are unique within one catalog."""

    def __init__(self):
        self._seen: dict[int, int] = {}

    def allocate(self, name: str) -> str:
        """
        Allocate an anchor for a section or record name.

        The first name to produce a given hash gets the bare hash; later names
        with the same hash (collisions or repeated names) get a ``-N`` suffix.

        Args:
            name: Section title or record filename

        Returns:
            Anchor string
        """
        value = hash_code(name)
        occurrence = self._seen.get(value, 0)
        self._seen[value] = occurrence + 1
        if occurrence == 0:
            return str(value)
        return f"{value}-{occurrence}"

    def reset(self) -> None:
        """Forget every allocated anchor."""
        self._seen.clear()
