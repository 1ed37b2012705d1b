import logging

from cryptography.fernet import Fernet, InvalidToken

#-----------------------------------------------------------------------------

class AbstractEncrypter:
    def decrypt(self, s: str) -> str: ...
    def encrypt(self, s: str) -> str: ...
    def is_encrypted(self, s: str) -> bool: ...

#-----------------------------------------------------------------------------

class FernetEncrypter(AbstractEncrypter):
    def __init__(self, key: str):
        self._key = key.strip()

        try:
            self._fernet = Fernet(self._key)
        except (ValueError, TypeError) as e:
            logging.error(f"Invalid Fernet key: {str(e)}")
            self._fernet = None

    #-----------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._fernet is not None

    #-----------------------------------------------------

    def decrypt(self, s: str) -> str:
        if not s or not self._fernet:
            return ""

        if not self.is_encrypted(s):
            return s

        try:
            return self._fernet.decrypt(s.encode()).decode()

        except InvalidToken as e:
            logging.error(f"Failed to decrypt value: {str(e) or 'invalid token'}")
            return s

    #-----------------------------------------------------

    def encrypt(self, s: str) -> str:
        if not s or not self._fernet:
            return ""

        return self._fernet.encrypt(s.encode()).decode()

    #-----------------------------------------------------

    def is_encrypted(self, s: str) -> bool:
        return s.startswith("gAAAA")

#-----------------------------------------------------------------------------
