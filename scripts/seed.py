#!/usr/bin/env python3
"""
Seed script: creates demo policies (one per built-in type plus a custom keyword policy).
Run after migrations: python scripts/seed.py
"""

import asyncio
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from aegis_guardrails.database import async_session_maker
from aegis_guardrails.models import Policy
from aegis_guardrails.storage.repositories import create_policy


CUSTOMER_ID = "00000000-0000-0000-0000-000000000001"
AGENT_ID = "00000000-0000-0000-0000-0000000000a1"

POLICIES = [
    {"name": "Block PII", "policy_type": "pii", "rule_spec": None, "agent_id": None},
    {"name": "Content safety", "policy_type": "content_safety", "rule_spec": None, "agent_id": None},
    {"name": "Prompt injection", "policy_type": "prompt_injection", "rule_spec": None, "agent_id": None},
    {
        "name": "No competitor products",
        "policy_type": "custom",
        "rule_spec": {"deny_keywords": ["widget", "gizmo"]},
        "agent_id": AGENT_ID,
    },
]


async def seed():
    async with async_session_maker() as session:
        result = await session.execute(
            select(Policy.name).where(Policy.customer_id == CUSTOMER_ID)
        )
        existing = set(result.scalars().all())

        for p in POLICIES:
            if p["name"] in existing:
                print(f"Policy '{p['name']}' already exists, skipping.")
                continue
            await create_policy(
                session,
                customer_id=CUSTOMER_ID,
                name=p["name"],
                policy_type=p["policy_type"],
                rule_spec=p["rule_spec"],
                agent_id=p["agent_id"],
            )
        await session.commit()

    print("Seed complete!")
    print(f"Demo agent: {AGENT_ID}")
    print("Example: curl -X POST http://localhost:8000/v1/guardrails/evaluate \\")
    print('  -H "Content-Type: application/json" \\')
    print(f'  -d \'{{"agent_id":"{AGENT_ID}","input_text":"buy a widget","context":{{}}}}\'')


if __name__ == "__main__":
    asyncio.run(seed())
