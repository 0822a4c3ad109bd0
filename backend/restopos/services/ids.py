"""Human-readable entity ids: ``<PREFIX>-<epoch ms>-<8 hex digits>``."""

import secrets
import time


def generate_entity_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4).upper()}"


def new_order_id() -> str:
    return generate_entity_id("ORD")


def new_customer_id() -> str:
    return generate_entity_id("CUST")
