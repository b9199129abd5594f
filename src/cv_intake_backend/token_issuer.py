from __future__ import annotations

import hashlib
import hmac


class TokenIssuer:
    """
    Issues integrity tokens for stored uploads.

    A token is the hex HMAC-SHA256 of ``submitter_id:file_path:file_url``
    under the service secret. Nothing is stored; anyone holding the secret
    can recompute it from the same three values.
    """

    SEPARATOR = ":"

    def __init__(self, secret: str) -> None:
        self._secret = secret.encode("utf-8")

    def issue(self, submitter_id: str, file_path: str, file_url: str) -> str:
        data = self.SEPARATOR.join((submitter_id, file_path, file_url))
        return hmac.new(self._secret, data.encode("utf-8"), hashlib.sha256).hexdigest()

    def verify(self, token: str, submitter_id: str, file_path: str, file_url: str) -> bool:
        expected = self.issue(submitter_id, file_path, file_url)
        return hmac.compare_digest(expected, token)
