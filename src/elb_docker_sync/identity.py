import httpx

from .errors import MetadataUnavailableError

TOKEN_PATH = "/latest/api/token"
IDENTITY_PATH = "/latest/dynamic/instance-identity/document"
TOKEN_TTL_SECONDS = "60"


def fetch_instance_id(
    base_url: str = "http://169.254.169.254",
    timeout: float = 2.0,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Read the instance id from the EC2 instance identity document (IMDSv2)."""
    try:
        with httpx.Client(base_url=base_url, timeout=timeout, transport=transport) as client:
            token_resp = client.put(TOKEN_PATH, headers={"X-aws-ec2-metadata-token-ttl-seconds": TOKEN_TTL_SECONDS})
            token_resp.raise_for_status()

            doc_resp = client.get(IDENTITY_PATH, headers={"X-aws-ec2-metadata-token": token_resp.text})
            doc_resp.raise_for_status()
            document = doc_resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise MetadataUnavailableError(f"Instance metadata unavailable at {base_url}: {e}") from e

    instance_id = document.get("instanceId") if isinstance(document, dict) else None
    if not instance_id:
        raise MetadataUnavailableError("Instance identity document has no instanceId")
    return instance_id


def resolve_host_id(override: str | None, base_url: str, timeout: float) -> str:
    if override:
        return override
    return fetch_instance_id(base_url=base_url, timeout=timeout)
