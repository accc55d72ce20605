"""
Database schema

References between records (product -> category, order -> user, order ->
order items) are plain identifier columns; the services check that they
resolve at write time.
"""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS categories (
    id          UUID PRIMARY KEY,
    name        VARCHAR(255) NOT NULL,
    icon        VARCHAR(255),
    color       VARCHAR(50)
);

CREATE TABLE IF NOT EXISTS products (
    id                UUID PRIMARY KEY,
    name              VARCHAR(255) NOT NULL,
    description       TEXT NOT NULL DEFAULT '',
    rich_description  TEXT NOT NULL DEFAULT '',
    image             TEXT NOT NULL DEFAULT '',
    images            TEXT[] NOT NULL DEFAULT '{}',
    brand             VARCHAR(255) NOT NULL DEFAULT '',
    price             NUMERIC(12, 2) NOT NULL DEFAULT 0,
    category_id       UUID NOT NULL,
    count_in_stock    INTEGER NOT NULL CHECK (count_in_stock >= 0),
    rating            NUMERIC(4, 2) NOT NULL DEFAULT 0,
    num_reviews       INTEGER NOT NULL DEFAULT 0,
    is_featured       BOOLEAN NOT NULL DEFAULT FALSE,
    date_created      TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_products_category_id ON products (category_id);
CREATE INDEX IF NOT EXISTS idx_products_is_featured ON products (is_featured);

CREATE TABLE IF NOT EXISTS users (
    id             UUID PRIMARY KEY,
    name           VARCHAR(255) NOT NULL,
    email          VARCHAR(255) NOT NULL,
    password_hash  TEXT NOT NULL,
    phone          VARCHAR(50) NOT NULL DEFAULT '',
    is_admin       BOOLEAN NOT NULL DEFAULT FALSE,
    street         VARCHAR(255) NOT NULL DEFAULT '',
    apartment      VARCHAR(255) NOT NULL DEFAULT '',
    zip            VARCHAR(50) NOT NULL DEFAULT '',
    city           VARCHAR(255) NOT NULL DEFAULT '',
    country        VARCHAR(255) NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_users_email_lower ON users (lower(email));

CREATE TABLE IF NOT EXISTS order_items (
    id          UUID PRIMARY KEY,
    product_id  UUID NOT NULL,
    quantity    INTEGER NOT NULL CHECK (quantity > 0)
);

CREATE TABLE IF NOT EXISTS orders (
    id                 UUID PRIMARY KEY,
    order_items        UUID[] NOT NULL CHECK (cardinality(order_items) > 0),
    shipping_address1  VARCHAR(255) NOT NULL,
    shipping_address2  VARCHAR(255),
    city               VARCHAR(255) NOT NULL,
    zip                VARCHAR(50) NOT NULL,
    country            VARCHAR(255) NOT NULL,
    phone              VARCHAR(50) NOT NULL,
    status             VARCHAR(50) NOT NULL DEFAULT 'Pending',
    total_price        NUMERIC(12, 2) NOT NULL,
    user_id            UUID NOT NULL,
    date_ordered       TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_orders_user_id ON orders (user_id);
CREATE INDEX IF NOT EXISTS idx_orders_date_ordered ON orders (date_ordered DESC);
"""
