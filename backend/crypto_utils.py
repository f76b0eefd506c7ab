import os
import json
import logging
from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class CipherError(Exception):
    """Raised when a stored token cannot be decrypted with the configured key."""


class AESCipher:
    """Fernet (AES) encryption for quiz bodies and crossword clues at rest.

    Answer keys live inside those blobs, so anything read straight from the
    database is unreadable without the server-side key.
    """

    def __init__(self, key=None):
        self.cipher = Fernet(key) if key else None

    def init_app(self, app):
        key = app.config.get('AES_KEY')
        if not key:
            key = self._load_or_create_key(app.config.get('AES_KEY_PATH', 'aes.key'))
        if isinstance(key, str):
            key = key.encode()
        self.cipher = Fernet(key)
        app.extensions['aes'] = self

    @staticmethod
    def _load_or_create_key(key_path):
        if os.path.exists(key_path):
            with open(key_path, 'rb') as f:
                return f.read().strip()
        key = Fernet.generate_key()
        with open(key_path, 'wb') as f:
            f.write(key)
        logger.warning("Generated new AES key and saved to %s", key_path)
        return key

    def encrypt(self, data):
        """Encrypts string or JSON-serialisable data."""
        if isinstance(data, (dict, list)):
            data = json.dumps(data)
        if isinstance(data, str):
            data = data.encode()
        return self.cipher.encrypt(data).decode()

    def decrypt(self, token):
        """Decrypts to a dict/list when the payload is JSON, else to a string."""
        if isinstance(token, str):
            token = token.encode()
        try:
            decrypted_data = self.cipher.decrypt(token).decode()
        except InvalidToken as e:
            raise CipherError("token was not produced by the configured key") from e
        try:
            return json.loads(decrypted_data)
        except json.JSONDecodeError:
            return decrypted_data
