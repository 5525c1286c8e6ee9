import os
import tempfile

from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.core.files.base import ContentFile
from django.test import TestCase
from django.test.utils import override_settings
from django.urls import reverse

from gallery.models import Picture

from .utils import build_png_upload


def remove_image_url(picture_id):
    return f"{reverse('gallery:remove_image')}?id={picture_id}"


@override_settings(UPLOAD_DIR_NAME="uploads")
class RemoveImageTests(TestCase):
    def setUp(self):
        super().setUp()
        self.user = get_user_model().objects.create_user(
            username="editor",
            email="editor@example.com",
            password="password",
        )
        self.picture = Picture.objects.create(
            title="Sunset", image="uploads/pictures/sunset.png"
        )

    def test_requires_login(self):
        response = self.client.post(remove_image_url(self.picture.pk))

        self.assertEqual(response.status_code, 302)
        self.picture.refresh_from_db()
        self.assertTrue(self.picture.image)

    def test_requires_post(self):
        self.client.force_login(self.user)

        response = self.client.get(remove_image_url(self.picture.pk))

        self.assertEqual(response.status_code, 405)

    def test_removes_image_and_file(self):
        self.client.force_login(self.user)

        with tempfile.TemporaryDirectory() as media_root:
            with override_settings(MEDIA_ROOT=media_root):
                self.picture.image.save("sunset.png", ContentFile(b"data"), save=True)
                path = self.picture.image.path
                self.assertTrue(os.path.exists(path))

                response = self.client.post(remove_image_url(self.picture.pk))

                self.assertFalse(os.path.exists(path))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})
        self.picture.refresh_from_db()
        self.assertFalse(self.picture.image)

    def test_picture_without_image(self):
        self.client.force_login(self.user)
        picture = Picture.objects.create(title="Empty")

        response = self.client.post(remove_image_url(picture.pk))

        self.assertEqual(response.status_code, 200)

    def test_unknown_picture(self):
        self.client.force_login(self.user)

        response = self.client.post(remove_image_url(self.picture.pk + 100))

        self.assertEqual(response.status_code, 404)

    def test_missing_or_invalid_id(self):
        self.client.force_login(self.user)

        response = self.client.post(reverse("gallery:remove_image"))
        self.assertEqual(response.status_code, 400)

        response = self.client.post(remove_image_url("abc"))
        self.assertEqual(response.status_code, 400)


@override_settings(UPLOAD_DIR_NAME="uploads")
class EditPictureTests(TestCase):
    def setUp(self):
        super().setUp()
        self.user = get_user_model().objects.create_user(
            username="editor",
            email="editor@example.com",
            password="password",
        )
        self.client.force_login(self.user)

    def test_add_form(self):
        response = self.client.get(reverse("gallery:add_picture"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'enctype="multipart/form-data"')
        self.assertContains(response, 'type="file"')
        self.assertNotContains(response, "image_preview")

    def test_edit_form_shows_preview(self):
        picture = Picture.objects.create(title="Sunset", image="uploads/pictures/sunset.png")

        response = self.client.get(reverse("gallery:edit_picture", args=[picture.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, f'id="picture_{picture.pk}_image_preview"')
        self.assertContains(response, "/images/uploads/pictures/sunset.png")

    def test_unknown_picture(self):
        response = self.client.get(reverse("gallery:edit_picture", args=[999]))

        self.assertEqual(response.status_code, 404)

    def test_create_with_upload(self):
        with tempfile.TemporaryDirectory() as media_root:
            with override_settings(MEDIA_ROOT=media_root):
                response = self.client.post(
                    reverse("gallery:add_picture"),
                    {"title": "Sunset", "image": build_png_upload("sunset.png")},
                )

        picture = Picture.objects.get()
        self.assertRedirects(
            response,
            reverse("gallery:edit_picture", args=[picture.pk]),
            fetch_redirect_response=False,
        )
        self.assertEqual(picture.image.name, "uploads/pictures/sunset.png")
        messages = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertIn("Saved Sunset.", messages)

    def test_invalid_submission(self):
        response = self.client.post(reverse("gallery:add_picture"), {"title": ""})

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Update failed")
        self.assertFalse(Picture.objects.exists())

    def test_requires_login(self):
        self.client.logout()

        response = self.client.get(reverse("gallery:add_picture"))

        self.assertEqual(response.status_code, 302)
