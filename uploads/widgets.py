# uploads/widgets.py

import copy
import logging
import re
from collections.abc import Mapping

from django import forms
from django.forms.utils import flatatt
from django.utils.html import format_html
from django.utils.safestring import mark_safe
from django.utils.translation import gettext

from .conf import build_remove_image_url, get_setting
from .exceptions import MissingRequiredOptionError

logger = logging.getLogger(__name__)


PLACEHOLDER_RE = re.compile(r"%(input|delete|delete_label|file)%")

PREVIEW_KEYS = ("isNew", "imgDir", "value", "objectId", "moduleName")

# Reads everything it needs from the data-* attributes of the link.
PREVIEW_DELETE_SCRIPT = (
    "var link = this;"
    " if (confirm(link.dataset.confirm)) {"
    " fetch(link.dataset.removeUrl, {method: 'POST', credentials: 'same-origin',"
    " headers: {'X-CSRFToken': (document.cookie.match(/csrftoken=([^;]+)/) || [])[1] || ''}})"
    ".then(function (response) {"
    " if (response.ok) {"
    " var preview = document.getElementById(link.dataset.preview);"
    " if (preview) { preview.remove(); }"
    " var input = document.getElementById(link.dataset.input);"
    " if (input) { input.value = ''; }"
    " }"
    " });"
    " }"
    " return false;"
)

PREVIEW_TEMPLATE = (
    '<div id="{}" class="image-preview">'
    '<a href="{}" class="lightbox"><img src="{}" width="100" alt="" /></a>'
    "{}"
    "</div> %input% <br />%delete% %delete_label%"
)

DELETE_BUTTON_TEMPLATE = (
    '<br /><a href="#" class="image-preview-delete"'
    ' data-confirm="{}" data-remove-url="{}" data-preview="{}" data-input="{}"'
    ' onclick="{}">&times;&nbsp;{}</a><br />'
)

# Attributes that only make sense on the file input itself.
INPUT_ONLY_ATTRS = ("id", "required")


def substitute_placeholders(template, replacements):
    """
    Replace every %placeholder% of the template in a single pass.
    Replacement values are never scanned for placeholders again.
    """
    return PLACEHOLDER_RE.sub(
        lambda match: str(replacements[match.group(0)]), template
    )


class EditableFileInput(forms.FileInput):
    """
    Upload input with the possibility to remove a previously uploaded file.

    Available options:

     * file_src:     The current file web source path, or False (required)
     * edit_mode:    True to show the delete and file controls
     * is_image:     Whether the file is a displayable image
     * with_delete:  Whether to add a delete checkbox or not
     * with_preview: Whether to render an image preview block
     * preview:      Preview record (isNew, imgDir, value, objectId, moduleName)
     * delete_label: The delete label used by the template
     * template:     The HTML template used in edit mode. Placeholders:
                       %input%, %delete%, %delete_label%, %file%
     * id_format:    Format used to build element ids from field names

    In edit mode the widget renders an extra checkbox named after the
    upload field with a "_delete" suffix. Ticking it without sending a
    new file makes value_from_datadict() return False, which FileField
    treats as a request to clear the current file.

    The translator, remove-image URL builder and settings accessor are
    injectable and default to gettext, reverse() and django.conf.settings.
    """

    input_type = "file"
    needs_multipart_form = True

    required_options = ("file_src",)
    default_options = {
        "edit_mode": True,
        "is_image": False,
        "with_delete": True,
        "with_preview": False,
        "preview": {},
        "delete_label": "remove the current file",
        "template": "%file%<br />%input%<br />%delete% %delete_label%",
        "id_format": "id_%s",
    }

    def __init__(
        self,
        attrs=None,
        options=None,
        translator=None,
        url_builder=None,
        config=None,
    ):
        super().__init__(attrs)

        options = dict(options or {})
        allowed = set(self.default_options) | set(self.required_options)
        unknown = sorted(set(options) - allowed)
        if unknown:
            raise ValueError(
                f"{self.__class__.__name__} does not support the following "
                f"options: {', '.join(repr(name) for name in unknown)}."
            )

        self.options = copy.deepcopy(self.default_options)
        self.options.update(options)
        self.check_required_options()

        self.translator = translator or gettext
        self.url_builder = url_builder or build_remove_image_url
        self.config = config or get_setting

    def __deepcopy__(self, memo):
        obj = super().__deepcopy__(memo)
        obj.options = copy.deepcopy(self.options, memo)
        return obj

    # Options

    def check_required_options(self):
        for option in self.required_options:
            if option not in self.options:
                raise MissingRequiredOptionError(self.__class__, option)

    def has_option(self, name):
        return name in self.options

    def get_option(self, name, default=None):
        return self.options.get(name, default)

    def set_option(self, name, value):
        if name not in self.default_options and name not in self.required_options:
            raise ValueError(
                f"{self.__class__.__name__} does not support the option '{name}'."
            )
        self.options[name] = value

    # Markup helpers

    def render_tag(self, tag, attrs=None):
        return format_html("<{}{} />", tag, flatatt(attrs or {}))

    def render_content_tag(self, tag, content, attrs=None):
        return format_html("<{}{}>{}</{}>", tag, flatatt(attrs or {}), content, tag)

    def generate_id(self, name):
        """
        Build an element id from a field name.

        photo -> id_photo, photo[] -> id_photo, picture[image] -> id_picture_image
        """
        id_format = self.get_option("id_format")
        if not id_format:
            return None

        if "[" in name:
            name = (
                name.replace("[]", "")
                .replace("][", "_")
                .replace("[", "_")
                .replace("]", "")
            )

        if "%s" in id_format:
            name = id_format % name

        name = re.sub(r"^[^A-Za-z]+", "", name)
        return re.sub(r"[^A-Za-z0-9:_.\-]", "_", name)

    @staticmethod
    def delete_field_name(name):
        if name.endswith("]"):
            return f"{name[:-1]}_delete]"
        return f"{name}_delete"

    def extra_attrs(self, attrs):
        """Widget and caller attributes that are merged into the extra tags."""
        merged = self.build_attrs(self.attrs, attrs)
        for attr in INPUT_ONLY_ATTRS:
            merged.pop(attr, None)
        return merged

    # Rendering

    def render(self, name, value, attrs=None, renderer=None):
        self.check_required_options()

        input_html = super().render(name, value, attrs, renderer)

        if not self.get_option("edit_mode"):
            return input_html

        if self.get_option("with_delete"):
            delete_name = self.delete_field_name(name)
            delete_id = self.generate_id(delete_name)
            delete_html = self.render_tag(
                "input",
                {
                    "type": "checkbox",
                    "name": delete_name,
                    "id": delete_id,
                    **self.extra_attrs(attrs),
                },
            )
            delete_label_html = self.render_content_tag(
                "label",
                self.translator(str(self.get_option("delete_label"))),
                {"for": delete_id},
            )
        else:
            delete_html = ""
            delete_label_html = ""

        template = self.get_template(name, attrs)

        return mark_safe(
            substitute_placeholders(
                template,
                {
                    "%input%": input_html,
                    "%delete%": delete_html,
                    "%delete_label%": delete_label_html,
                    "%file%": self.get_file_as_tag(attrs),
                },
            )
        )

    def get_file_as_tag(self, attrs=None):
        file_src = self.get_option("file_src")

        if self.get_option("is_image"):
            if file_src is False:
                return ""
            return self.render_tag("img", {"src": file_src, **self.extra_attrs(attrs)})

        if file_src is None or file_src is False:
            return ""
        return str(file_src)

    # Preview

    def get_template(self, name, attrs=None):
        """
        Return the template used for this render.

        A valid preview record of an existing image replaces the configured
        template; the configured option itself is left untouched.
        """
        preview_template = self.get_preview_template(name, attrs)
        if preview_template is not None:
            return preview_template
        return self.get_option("template")

    def get_preview_data(self):
        if not self.get_option("with_preview"):
            return None

        preview = self.get_option("preview")
        if not preview:
            return None
        if not isinstance(preview, Mapping):
            logger.debug("Ignoring preview data of type %s", type(preview).__name__)
            return None

        missing = [key for key in PREVIEW_KEYS if preview.get(key) is None]
        if missing:
            logger.debug("Ignoring incomplete preview data, missing %s", missing)
            return None

        return preview

    def get_preview_template(self, name, attrs=None):
        preview = self.get_preview_data()
        if preview is None or preview["isNew"] or not preview["value"]:
            return None

        image_path = "/images/{}/{}/{}".format(
            self.config("UPLOAD_DIR_NAME"), preview["imgDir"], preview["value"]
        )
        preview_id = f"picture_{preview['objectId']}_image_preview"

        if self.get_option("with_delete"):
            delete_button = self.render_preview_delete_button(
                name, attrs, preview, preview_id
            )
        else:
            delete_button = ""

        return format_html(
            PREVIEW_TEMPLATE, preview_id, image_path, image_path, delete_button
        )

    def render_preview_delete_button(self, name, attrs, preview, preview_id):
        input_id = (attrs or {}).get("id") or self.attrs.get("id") or self.generate_id(name)
        return format_html(
            DELETE_BUTTON_TEMPLATE,
            self.translator("Are you sure?"),
            self.url_builder(preview["moduleName"], preview["objectId"]),
            preview_id,
            input_id or "",
            PREVIEW_DELETE_SCRIPT,
            self.translator("Delete the image"),
        )

    # Form data

    def value_from_datadict(self, data, files, name):
        upload = super().value_from_datadict(data, files, name)
        if upload:
            return upload

        if self.get_option("edit_mode") and self.get_option("with_delete"):
            checkbox = forms.CheckboxInput()
            if checkbox.value_from_datadict(data, files, self.delete_field_name(name)):
                return False

        return upload

    def value_omitted_from_data(self, data, files, name):
        return (
            super().value_omitted_from_data(data, files, name)
            and self.delete_field_name(name) not in data
        )
