"""Replace the __SITE_URL__ placeholder in the built sitemap.

Usage:
    SITE_URL=https://example.pt update-sitemap-domain [dist/sitemap.xml]

Skips quietly (exit 0) when SITE_URL is unset or the sitemap does not exist.
"""

import argparse
import os
from pathlib import Path
from typing import List, Optional

PLACEHOLDER = "__SITE_URL__"
DEFAULT_SITEMAP = "dist/sitemap.xml"


def update_sitemap(sitemap_file: Path, site_url: str) -> bool:
    """Rewrite the sitemap in place. Returns False when the file is missing."""
    if not sitemap_file.is_file():
        return False
    site_url = site_url.rstrip("/")
    content = sitemap_file.read_text(encoding="utf-8")
    tmp_file = sitemap_file.with_name(sitemap_file.name + ".tmp")
    tmp_file.write_text(content.replace(PLACEHOLDER, site_url), encoding="utf-8")
    tmp_file.replace(sitemap_file)
    return True


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Fill in the site URL in sitemap.xml.")
    parser.add_argument("sitemap_file", nargs="?", default=DEFAULT_SITEMAP)
    args = parser.parse_args(argv)

    site_url = os.environ.get("SITE_URL", "")
    if not site_url:
        print("SITE_URL not set; skipping sitemap update")
        return
    sitemap_file = Path(args.sitemap_file)
    if not update_sitemap(sitemap_file, site_url):
        print(f"sitemap file not found at {sitemap_file}; skipping sitemap update")


if __name__ == "__main__":
    main()
