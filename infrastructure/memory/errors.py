from botocore.exceptions import ClientError


def client_error(code: str, message: str, operation: str) -> ClientError:
    """Build the ClientError the real service would raise."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)
