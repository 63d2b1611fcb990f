"""Move legacy flat project documents into an owner's nested project tree.

Old uploads wrote projects/{autoId} with {title, description, images: [url]}.
Each such document becomes projects/{owner}/project/{autoId} with one image
document per URL, then the flat document is deleted.

Usage:
    python -m scripts.migrate_flat_projects --owner <uid> [--dry-run]
"""

import asyncio
import logging
import sys

from app.application.interfaces.stores import IDocumentStore
from app.core.config import get_settings
from app.infrastructure.persistence import create_document_store
from app.shared.collections import COLLECTION_PROJECTS, images_path, project_path
from app.shared.telemetry.logging import setup_logging
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger("scripts.migrate_flat_projects")


async def migrate(documents: IDocumentStore, owner: str, dry_run: bool = False) -> int:
    """Migrate every flat project document; return how many were moved."""
    moved = 0
    for doc in await documents.list_documents(COLLECTION_PROJECTS):
        urls = doc.data.get("images")
        if not isinstance(urls, list):
            continue  # per-account namespace document, not a legacy project
        target = project_path(owner, doc.id)
        logger.info("%s -> %s (%d images)", doc.path, target, len(urls))
        moved += 1
        if dry_run:
            continue
        await documents.set_document(
            target,
            {
                "title": doc.data.get("title"),
                "description": doc.data.get("description"),
                "createdAt": doc.data.get("createdAt") or utc_now(),
                "imageCount": len(urls),
            },
        )
        for position, url in enumerate(urls):
            await documents.set_document(
                f"{images_path(target)}/{generate_cuid()}",
                {
                    "imageUrl": url,
                    "imageTitle": None,
                    "imageDescription": "",
                    "position": position,
                },
            )
        await documents.delete_document(doc.path)
    return moved


async def main() -> None:
    if "--owner" not in sys.argv or sys.argv.index("--owner") + 1 >= len(sys.argv):
        print(
            "Usage: python -m scripts.migrate_flat_projects --owner <uid> [--dry-run]",
            file=sys.stderr,
        )
        sys.exit(1)
    owner = sys.argv[sys.argv.index("--owner") + 1]
    dry_run = "--dry-run" in sys.argv

    settings = get_settings()
    setup_logging()
    documents = create_document_store(settings)
    try:
        moved = await migrate(documents, owner, dry_run=dry_run)
    finally:
        await documents.aclose()
    print(f"{'Would move' if dry_run else 'Moved'} {moved} project(s) to {owner}")


if __name__ == "__main__":
    asyncio.run(main())
