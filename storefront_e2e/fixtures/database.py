# storefront_e2e/fixtures/database.py
from __future__ import annotations

"""WordPress database lookups
-----------------------------
Helpers over the WordPress/WooCommerce tables: lookups that confirm what the
storefront persisted (payment tokens, users, user meta), and removal of the
payment tokens a test leaves behind.
"""

import re
from typing import Any, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from storefront_e2e.utils.config import Settings, get_settings
from storefront_e2e.utils.logger import get_logger

_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]+$")


def _ident(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Unsafe SQL identifier: {name!r}")
    return name


class WooCommerceDB:
    """Lookups against a WordPress database through a SQLAlchemy engine."""

    def __init__(self, engine: Engine, table_prefix: str = "wp_") -> None:
        self.engine = engine
        self.table_prefix = _ident(table_prefix)
        self.log = get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "WooCommerceDB":
        s = settings or get_settings()
        engine = create_engine(s.database_url(), pool_pre_ping=True)
        return cls(engine, table_prefix=s.DB_TABLE_PREFIX)

    def dispose(self) -> None:
        self.engine.dispose()

    def grab_prefixed_table_name_for(self, table: str) -> str:
        return f"{self.table_prefix}{_ident(table)}"

    def grab_column_from_database(
        self,
        table: str,
        column: str,
        criteria: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
    ) -> list[Any]:
        """Values of `column` for the rows of `table` matching every criteria pair."""
        sql = f"SELECT {_ident(column)} FROM {_ident(table)}"
        params: dict[str, Any] = {}
        if criteria:
            clauses = []
            for i, (key, value) in enumerate(criteria.items()):
                clauses.append(f"{_ident(key)} = :p{i}")
                params[f"p{i}"] = value
            sql += " WHERE " + " AND ".join(clauses)
        if order_by:
            sql += f" ORDER BY {_ident(order_by)}"
        with self.engine.connect() as conn:
            rows = conn.execute(text(sql), params).all()
        self.log.debug(f"{sql} {params} -> {len(rows)} row(s)")
        return [r[0] for r in rows]

    def grab_user_id_from_database(self, user_login: str) -> int:
        ids = self.grab_column_from_database(
            self.grab_prefixed_table_name_for("users"), "ID", {"user_login": user_login}
        )
        if not ids:
            raise LookupError(f"No WordPress user with login {user_login!r}")
        return int(ids[0])

    def grab_payment_token_ids(self, user_id: int, gateway_id: str) -> list[int]:
        """Token IDs for a user and gateway, oldest first."""
        ids = self.grab_column_from_database(
            self.grab_prefixed_table_name_for("woocommerce_payment_tokens"),
            "token_id",
            {"user_id": user_id, "gateway_id": gateway_id},
            order_by="token_id",
        )
        return [int(i) for i in ids]

    def grab_payment_token(self, token_id: int) -> Optional[str]:
        """Raw gateway token string for a payment token row, or None if it is gone."""
        tokens = self.grab_column_from_database(
            self.grab_prefixed_table_name_for("woocommerce_payment_tokens"),
            "token",
            {"token_id": token_id},
        )
        return tokens[0] if tokens else None

    def grab_user_meta(self, user_id: int, meta_key: str) -> Optional[str]:
        values = self.grab_column_from_database(
            self.grab_prefixed_table_name_for("usermeta"),
            "meta_value",
            {"user_id": user_id, "meta_key": meta_key},
        )
        return values[0] if values else None

    # ---------- Cleanup ----------

    def delete_payment_tokens(self, user_id: int, gateway_id: str) -> int:
        """Remove a user's payment tokens for a gateway, meta rows included. Returns the tokens removed."""
        tokens = self.grab_prefixed_table_name_for("woocommerce_payment_tokens")
        tokenmeta = self.grab_prefixed_table_name_for("woocommerce_payment_tokenmeta")
        params = {"user_id": user_id, "gateway_id": gateway_id}
        with self.engine.begin() as conn:
            conn.execute(
                text(
                    f"DELETE FROM {tokenmeta} WHERE payment_token_id IN "
                    f"(SELECT token_id FROM {tokens} WHERE user_id = :user_id AND gateway_id = :gateway_id)"
                ),
                params,
            )
            result = conn.execute(
                text(f"DELETE FROM {tokens} WHERE user_id = :user_id AND gateway_id = :gateway_id"),
                params,
            )
        self.log.debug(f"Deleted {result.rowcount} payment token(s) of user {user_id} for {gateway_id}")
        return result.rowcount


__all__ = ["WooCommerceDB"]
