import json


def serialize_tags(tags: list[str] | None) -> str | None:
    if tags is None:
        return None
    return json.dumps(tags)


def deserialize_tags(tags_str: str | None) -> list[str] | None:
    if tags_str is None:
        return None

    tags = json.loads(tags_str)
    if not isinstance(tags, list):
        raise ValueError("Stored tags are not a JSON array")
    return [str(tag) for tag in tags]
