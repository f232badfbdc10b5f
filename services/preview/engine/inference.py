"""Infers a type-tagged data schema from a sanitized preview value."""

from typing import Any, List
from shared.constants import MAX_PREVIEW_ARRAY_ITEMS, MAX_PREVIEW_DEPTH
from shared.types import DataSchema, DataSchemaField


def _child_path(parent: str, key: str) -> str:
    return f"{parent}.{key}" if parent else key


def _item_path(parent: str) -> str:
    return f"{parent}[]"


def infer_data_schema(value: Any, path: str = "", depth: int = 0) -> DataSchema:
    if depth >= MAX_PREVIEW_DEPTH:
        return DataSchema(type="unknown", path=path)

    if value is None:
        return DataSchema(type="null", path=path)
    # bool is an int subclass
    if isinstance(value, bool):
        return DataSchema(type="boolean", path=path)
    if isinstance(value, (int, float)):
        return DataSchema(type="number", path=path)
    if isinstance(value, str):
        return DataSchema(type="string", path=path)

    if isinstance(value, list):
        item_path = _item_path(path)
        samples = value[:MAX_PREVIEW_ARRAY_ITEMS]
        if not samples:
            item_schema = DataSchema(type="unknown", path=item_path)
        else:
            item_schema = _merge_schemas(
                [infer_data_schema(item, item_path, depth + 1) for item in samples],
                item_path
            )
        return DataSchema(type="array", path=path, item_schema=item_schema)

    if isinstance(value, dict):
        fields = [
            DataSchemaField(
                key=key,
                path=_child_path(path, key),
                data_schema=infer_data_schema(item, _child_path(path, key), depth + 1)
            )
            for key, item in value.items()
        ]
        return DataSchema(type="object", path=path, fields=fields)

    return DataSchema(type="unknown", path=path)


def _merge_schemas(schemas: List[DataSchema], path: str) -> DataSchema:
    """Merges sample schemas; disagreeing types collapse to unknown"""
    kinds = {schema.type for schema in schemas}
    if len(kinds) != 1:
        return DataSchema(type="unknown", path=path)
    kind = kinds.pop()

    if kind == "object":
        buckets = {}
        for schema in schemas:
            for field in schema.fields or []:
                buckets.setdefault(field.key, []).append(field.data_schema)

        fields = []
        for key in sorted(buckets):
            bucket = buckets[key]
            field = DataSchemaField(
                key=key,
                path=_child_path(path, key),
                data_schema=_merge_schemas(bucket, _child_path(path, key))
            )
            if len(bucket) < len(schemas):
                field.optional = True
            fields.append(field)
        return DataSchema(type="object", path=path, fields=fields)

    if kind == "array":
        item_path = _item_path(path)
        items = [schema.item_schema for schema in schemas if schema.item_schema is not None]
        item_schema = _merge_schemas(items, item_path) if items else DataSchema(type="unknown", path=item_path)
        return DataSchema(type="array", path=path, item_schema=item_schema)

    return DataSchema(type=kind, path=path)
