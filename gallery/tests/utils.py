from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image


def build_png_upload(name="picture.png", size=(4, 4)):
    buffer = BytesIO()
    Image.new("RGB", size, color="white").save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")
