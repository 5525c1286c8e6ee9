from django.core.exceptions import ImproperlyConfigured


class MissingRequiredOptionError(ImproperlyConfigured):
    """Raised when a widget is built or rendered without a required option."""

    def __init__(self, widget_class, option):
        self.widget_class = widget_class
        self.option = option
        super().__init__(
            f"{widget_class.__name__} requires the option '{option}'."
        )
