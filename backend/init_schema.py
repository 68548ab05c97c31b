"""
Create the candidates and notes tables in the configured database.

Run with: python init_schema.py
"""
import asyncio
from dotenv import load_dotenv

load_dotenv()

from candidate_crm.config import get_settings
from candidate_crm.database import Database


async def init_schema():
    database = Database(get_settings().database_url)
    try:
        await database.init_models()
        tables = await database.check_tables()
    finally:
        await database.dispose()

    for table, present in tables.items():
        print(f"{'✅' if present else '❌'} {table}")
    return all(tables.values())


if __name__ == "__main__":
    print("Pushing schema to database...")
    ok = asyncio.run(init_schema())
    print("Schema ready!" if ok else "Schema incomplete")
