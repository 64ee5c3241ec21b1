"""Create tax_calculation_history table for logged calculations."""

from yoyo import step

__depends__ = {"0001_tax_rule_tables"}

steps = [
    step(
        """
        CREATE TABLE tax_calculation_history (
            id                  UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            financial_year      VARCHAR(7) NOT NULL,
            taxable_income      NUMERIC(15,2) NOT NULL,
            calculated_tax      NUMERIC(15,2) NOT NULL,
            calculation_details JSONB,
            client_ip           VARCHAR(45),
            user_agent          VARCHAR(500),
            created_at          TIMESTAMPTZ DEFAULT NOW()
        )
        """,
        "DROP TABLE IF EXISTS tax_calculation_history",
    ),
    step(
        "CREATE INDEX idx_tax_calculation_history_created ON tax_calculation_history (created_at)",
        "DROP INDEX IF EXISTS idx_tax_calculation_history_created",
    ),
]
