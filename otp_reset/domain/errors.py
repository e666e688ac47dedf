from __future__ import annotations


class ResetError(Exception): ...
class ValidationError(ResetError): ...
class ChallengeNotFound(ResetError): ...
class ChallengeExpired(ResetError): ...
class CodeMismatch(ResetError): ...
class Unauthorized(ResetError): ...
class WeakPassword(ResetError): ...
class DeliveryError(ResetError): ...
class CredentialStoreError(ResetError): ...
