from typing import Dict, Optional


class InputValidator:
    """Trimming and required-field checks done by front-ends before calling the library.

    The library itself assumes already-trimmed, non-empty strings.
    """

    @staticmethod
    def clean(text: Optional[str]) -> str:
        if text is None:
            return ""
        return text.strip()

    @staticmethod
    def is_present(text: Optional[str]) -> bool:
        return bool(InputValidator.clean(text))

    @staticmethod
    def require(**fields: Optional[str]) -> Dict[str, str]:
        """Trim every field and raise ValueError naming the ones left blank."""
        cleaned = {name: InputValidator.clean(value) for name, value in fields.items()}
        missing = [name for name, value in cleaned.items() if not value]
        if missing:
            labels = ", ".join(name.replace("_", " ") for name in missing)
            raise ValueError(f"Required field(s) missing: {labels}")
        return cleaned

    @staticmethod
    def optional(text: Optional[str]) -> Optional[str]:
        # Blank optional input means "leave unchanged"
        cleaned = InputValidator.clean(text)
        return cleaned or None
