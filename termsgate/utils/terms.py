"""
Terms content provider.

The gate treats the terms as opaque text; this module only locates and reads
it.
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger("termsgate")


def read_terms(terms_file: Path) -> Optional[str]:
    """Read the terms text, or None if it is missing or empty."""
    try:
        with open(terms_file, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        logger.error(f"Terms file not found: {terms_file}")
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read terms file {terms_file}: {e}")
        return None

    if not content.strip():
        logger.error(f"Terms file is empty: {terms_file}")
        return None
    return content
