from django.urls import path

from . import views

app_name = "gallery"

urlpatterns = [
    path("add/", views.edit_picture, name="add_picture"),
    path("<int:picture_id>/edit/", views.edit_picture, name="edit_picture"),
    path("removeImage", views.remove_image, name="remove_image"),
]
