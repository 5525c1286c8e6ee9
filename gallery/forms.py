from django import forms

from uploads.widgets import EditableFileInput
from .models import Picture


class PictureForm(forms.ModelForm):
    """
    Form for creating and updating gallery pictures.
    The image field shows the current picture with a preview and delete controls.
    """

    class Meta:
        model = Picture
        fields = ("title", "image")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        picture = self.instance
        self.fields["image"].widget = EditableFileInput(
            options={
                "file_src": picture.image.url if picture.image else False,
                "is_image": True,
                "with_preview": True,
                "preview": picture.preview_data(),
                "delete_label": "Remove the current picture",
            },
        )

        for field_name, field in self.fields.items():
            field.widget.attrs["class"] = "border-black rounded-0"
