"""DDL for the gallery tables"""

from gallery_cms.store.postgres import PostgresStore

PAINTINGS_TABLE = "paintings"
PAGES_TABLE = "pages"
SETTINGS_TABLE = "gallery_settings"

SCHEMA_DDL = f"""
CREATE TABLE IF NOT EXISTS {PAINTINGS_TABLE} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title TEXT NOT NULL,
    title_ar TEXT,
    year TEXT NOT NULL,
    medium TEXT NOT NULL,
    medium_ar TEXT,
    dimensions TEXT NOT NULL,
    collection TEXT NOT NULL,
    collection_ar TEXT,
    theme TEXT NOT NULL,
    image_url TEXT NOT NULL,
    description TEXT NOT NULL,
    description_ar TEXT,
    is_featured BOOLEAN NOT NULL DEFAULT FALSE,
    display_order INTEGER NOT NULL DEFAULT 0,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS paintings_display_order_idx
    ON {PAINTINGS_TABLE} (display_order, created_at);

CREATE TABLE IF NOT EXISTS {PAGES_TABLE} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    slug TEXT NOT NULL UNIQUE,
    title_en TEXT NOT NULL,
    title_ar TEXT,
    content_en JSONB NOT NULL DEFAULT '{{}}'::jsonb,
    content_ar JSONB,
    meta_description_en TEXT,
    meta_description_ar TEXT,
    is_published BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS {SETTINGS_TABLE} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL UNIQUE,
    value_en TEXT NOT NULL,
    value_ar TEXT,
    description TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""


async def create_schema(store: PostgresStore) -> None:
    """Create the gallery tables if they do not exist yet."""
    await store.execute_script(SCHEMA_DDL)
