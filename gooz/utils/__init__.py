"""Cross-cutting utilities (lowest dependency layer).

No module in utils/ may import from the rest of the package.
"""

from gooz.utils.fs import atomic_write_text, ensure_dir, load_yaml

__all__ = ["atomic_write_text", "ensure_dir", "load_yaml"]
