"""Create tax_brackets, tax_levies and tax_offsets rule tables."""

from yoyo import step

__depends__: set[str] = set()

steps = [
    step(
        """
        CREATE TABLE tax_brackets (
            id              SERIAL PRIMARY KEY,
            financial_year  VARCHAR(7) NOT NULL,
            min_income      NUMERIC(15,2) NOT NULL,
            max_income      NUMERIC(15,2),
            rate            NUMERIC(5,4) NOT NULL,
            fixed_amount    NUMERIC(15,2) NOT NULL,
            bracket_order   INTEGER NOT NULL,
            is_active       BOOLEAN NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ DEFAULT NOW(),
            UNIQUE (financial_year, bracket_order)
        )
        """,
        "DROP TABLE IF EXISTS tax_brackets",
    ),
    step(
        """
        CREATE TABLE tax_levies (
            id                  SERIAL PRIMARY KEY,
            financial_year      VARCHAR(7) NOT NULL,
            levy_type           VARCHAR(50) NOT NULL,
            threshold_income    NUMERIC(15,2) NOT NULL,
            rate                NUMERIC(5,4) NOT NULL,
            max_income          NUMERIC(15,2),
            is_active           BOOLEAN NOT NULL DEFAULT TRUE,
            created_at          TIMESTAMPTZ DEFAULT NOW()
        )
        """,
        "DROP TABLE IF EXISTS tax_levies",
    ),
    step(
        """
        CREATE TABLE tax_offsets (
            id                  SERIAL PRIMARY KEY,
            financial_year      VARCHAR(7) NOT NULL,
            offset_type         VARCHAR(50) NOT NULL,
            max_income          NUMERIC(15,2),
            max_offset          NUMERIC(15,2) NOT NULL,
            phase_out_start     NUMERIC(15,2),
            phase_out_rate      NUMERIC(5,4),
            is_active           BOOLEAN NOT NULL DEFAULT TRUE,
            created_at          TIMESTAMPTZ DEFAULT NOW()
        )
        """,
        "DROP TABLE IF EXISTS tax_offsets",
    ),
    step(
        "CREATE INDEX idx_tax_brackets_year ON tax_brackets (financial_year, bracket_order)",
        "DROP INDEX IF EXISTS idx_tax_brackets_year",
    ),
    step(
        "CREATE INDEX idx_tax_levies_year ON tax_levies (financial_year)",
        "DROP INDEX IF EXISTS idx_tax_levies_year",
    ),
    step(
        "CREATE INDEX idx_tax_offsets_year ON tax_offsets (financial_year)",
        "DROP INDEX IF EXISTS idx_tax_offsets_year",
    ),
]
