"""
Foundry — API Schemas (DTOs)
=============================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and builds the OpenAPI document from them.

ORM rows never leave the API directly: every response is built through a
`*Read` schema (`model_config = {"from_attributes": True}`), so internal
columns such as hashed_password cannot leak.
"""
