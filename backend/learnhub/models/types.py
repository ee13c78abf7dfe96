"""
Column helpers shared by the models. Ids are opaque strings (uuid4 text for new rows,
legacy rows keep whatever id they were imported with).
"""
import uuid

ID_LENGTH = 64


def new_id() -> str:
    return str(uuid.uuid4())
