from fastapi import HTTPException, status


class ImageError(HTTPException):
    """Base error for uploaded images"""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid image upload"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.detail)


class InvalidImageType(ImageError):
    """MIME type or extension outside the allow-list"""
    def __init__(self, allowed_formats: str):
        super().__init__(
            detail=f"Invalid file type. Allowed: {allowed_formats}"
        )


class ImageTooLarge(ImageError):
    def __init__(self, max_size_mb: int):
        super().__init__(
            detail=f"File too large. Maximum size: {max_size_mb}MB"
        )


class TooManyImages(ImageError):
    def __init__(self, max_images: int):
        super().__init__(detail=f"Too many files. Maximum: {max_images}")


class EmptyImageFile(ImageError):
    def __init__(self):
        super().__init__(detail="File is empty")
