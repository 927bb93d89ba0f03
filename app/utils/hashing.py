import hashlib, json

def payload_hash(*payloads: dict) -> str:
    """Stable SHA-256 over one or more JSON-serializable dicts."""
    s = json.dumps(list(payloads), sort_keys=True, default=str)
    return hashlib.sha256(s.encode()).hexdigest()
