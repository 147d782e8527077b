"""Prompt templates for SQL generation and answer composition.

Rendering is pure string formatting: identical inputs give identical prompts.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class PromptMode(str, Enum):
    """Which SQL generation template to use."""
    SCOPED = "scoped"    # Target table is known
    OPEN = "open"        # Generator picks tables and joins


SQL_GENERATION_SCOPED = """You are an expert SQL generator. Convert the natural language question into a SQL query for a database with the schema below.
Only generate SELECT queries. Never generate INSERT, UPDATE, DELETE, DROP or any other DDL/DML statement.
The query must target the table: {table_name}.

Database Schema:
```sql
{schema}
```

Natural Language Question: "{question}"

Reply with the SQL query only, on a single line, without explanations or surrounding text.
Examples, for the table `users`:
- "show me all users" -> SELECT * FROM users;
- "find the last 5 registered users" -> SELECT * FROM users ORDER BY created_at DESC LIMIT 5;

SQL Query:
"""

SQL_GENERATION_OPEN = """You are an expert SQL generator. Convert the natural language question into a SQL query for a database with the schema below.
Only generate SELECT queries. Never generate INSERT, UPDATE, DELETE, DROP or any other DDL/DML statement.

Database Schema:
```sql
{schema}
```

Natural Language Question: "{question}"

Reply with the SQL query only, on a single line, without explanations or surrounding text.
Work out which table or tables the question is about from the schema.
Use JOINs when the answer needs data from more than one table.

Examples:
- "show me all users" -> SELECT * FROM users;
- "find the last 5 registered users" -> SELECT * FROM users ORDER BY created_at DESC LIMIT 5;
- "show me products with their categories" -> SELECT products.*, categories.name AS category_name FROM products JOIN categories ON products.category_id = categories.id;
- "which is the cheapest product" -> SELECT * FROM products ORDER BY price ASC LIMIT 1;

SQL Query:
"""

ANSWER_COMPOSITION = """I asked this question about my database: "{question}"
You generated this SQL for it:
{sql}
I executed the query and the database returned:
{result}

The result may be a printed Python value such as a list of row dictionaries or a bare number.
Read the values out of it and turn them into plain human language.
Answer the question concisely, as a person would, without SQL or technical jargon.
For example: "There are 5 users in the database.", "The first user is John Doe." or "The average age of users is 30 years."
Answer in the same language as the question: "{question}"
"""


def build_scoped_prompt(question: str, schema: str, table_name: str) -> str:
    """Prompt constrained to a single target table."""
    return SQL_GENERATION_SCOPED.format(question=question, schema=schema, table_name=table_name)


def build_open_prompt(question: str, schema: str) -> str:
    """Prompt that lets the generator infer tables and joins."""
    return SQL_GENERATION_OPEN.format(question=question, schema=schema)


def build_sql_prompt(
    question: str,
    schema: str,
    mode: PromptMode,
    table_name: Optional[str] = None,
) -> str:
    if mode is PromptMode.SCOPED:
        if not table_name:
            raise ValueError("A table name is required for scoped SQL generation")
        return build_scoped_prompt(question, schema, table_name)
    return build_open_prompt(question, schema)


def build_answer_prompt(question: str, sql: str, result_text: str) -> str:
    """Prompt asking for a natural-language answer from the query result."""
    return ANSWER_COMPOSITION.format(question=question, sql=sql, result=result_text)
