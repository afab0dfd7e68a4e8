import base64
import mimetypes
from pathlib import Path


def img_to_b64(img_path: str | Path) -> str:
    try:
        with Path(img_path).open("rb") as img_file:
            return base64.b64encode(img_file.read()).decode("utf-8")
    except FileNotFoundError:
        raise ValueError(f"Image file not found: {img_path}") from None
    except IsADirectoryError:
        raise ValueError(f"Expected a file but found a directory: {img_path}") from None


def img_to_data_uri(img_path: str | Path) -> str:
    """Read an image file into a data:<mime>;base64 URI."""
    media_type, _ = mimetypes.guess_type(str(img_path))
    if not media_type or not media_type.startswith("image/"):
        raise ValueError(f"Not a recognised image file: {img_path}")
    return f"data:{media_type};base64,{img_to_b64(img_path)}"
