import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import HttpResponseBadRequest, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render, reverse
from django.views.decorators.http import require_POST

from .forms import PictureForm
from .models import Picture

logger = logging.getLogger(__name__)


@login_required
def edit_picture(request, picture_id=None):
    """A view to add a picture or update an existing one"""

    picture = get_object_or_404(Picture, pk=picture_id) if picture_id else None

    if request.method == "POST":
        form = PictureForm(request.POST, request.FILES, instance=picture)
        if form.is_valid():
            picture = form.save()
            logger.info("Picture %s saved by %s", picture.pk, request.user)
            messages.success(request, f"Saved {picture.title}.")
            return redirect(reverse("gallery:edit_picture", args=[picture.pk]))
        messages.error(request, "Update failed. Please ensure the form is valid.")
    else:
        form = PictureForm(instance=picture)

    context = {
        "form": form,
        "picture": picture,
    }

    return render(request, "gallery/edit_picture.html", context)


@login_required
@require_POST
def remove_image(request):
    """Delete the stored image of a picture, called from the upload preview"""

    try:
        picture_id = int(request.GET["id"])
    except (KeyError, ValueError):
        return HttpResponseBadRequest("A numeric picture id is required.")

    picture = get_object_or_404(Picture, pk=picture_id)

    if picture.image:
        logger.info("Removing image %s of picture %s", picture.image.name, picture.pk)
        picture.image.delete(save=False)
    picture.image = None
    picture.save(update_fields=["image", "updated_at"])

    return JsonResponse({"success": True})
