import asyncio
import asyncpg
import os
from dotenv import load_dotenv
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable, CreateIndex
from fanbase.models import Base

load_dotenv()

def schema_statements():
    """DDL for every table and index declared in fanbase.models"""
    dialect = postgresql.dialect()
    for table in Base.metadata.sorted_tables:
        yield str(CreateTable(table, if_not_exists=True).compile(dialect=dialect))
        for index in table.indexes:
            yield str(CreateIndex(index, if_not_exists=True).compile(dialect=dialect))

async def create_schema():
    conn = await asyncpg.connect(os.getenv('DATABASE_URL'))
    try:
        for statement in schema_statements():
            await conn.execute(statement)
        print("✅ Schema created successfully!")

        tables = await conn.fetch("""
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = 'public'
        """)
        print("\n📋 Created tables:")
        for table in tables:
            print(f"  - {table['table_name']}")
    finally:
        await conn.close()

if __name__ == "__main__":
    asyncio.run(create_schema())
