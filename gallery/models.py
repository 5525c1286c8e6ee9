from django.db import models

from uploads.conf import get_setting


PICTURE_IMAGE_DIR = "pictures"


def picture_upload_to(instance, filename):
    return f"{get_setting('UPLOAD_DIR_NAME')}/{PICTURE_IMAGE_DIR}/{filename}"


class Picture(models.Model):
    """
    Uploaded gallery picture.

    Images are stored under MEDIA_ROOT/<UPLOAD_DIR_NAME>/pictures/ and
    served from /images/, which is where the upload preview looks for them.
    """

    title = models.CharField(max_length=254)
    image = models.ImageField(upload_to=picture_upload_to, null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-updated_at",)

    def __str__(self):
        return self.title

    def image_filename(self):
        if not self.image:
            return ""
        return self.image.name.rsplit("/", 1)[-1]

    def preview_data(self):
        """Return the record the upload widget uses to render a preview."""
        return {
            "isNew": self.pk is None,
            "imgDir": PICTURE_IMAGE_DIR,
            "value": self.image_filename(),
            "objectId": self.pk or "",
            "moduleName": "gallery",
        }
