from django import forms
from django.core.exceptions import ValidationError

from .models import NotificationSetting


class NotificationSettingForm(forms.ModelForm):
    class Meta:
        model = NotificationSetting
        fields = ["level", *NotificationSetting.EMAIL_EVENTS]

    # ----------------------------
    # VALIDATION
    # ----------------------------
    def clean_level(self):
        level = self.cleaned_data.get("level")

        if level == NotificationSetting.Level.GLOBAL and self.instance.source_type is None:
            raise ValidationError(
                "The global setting must pick a level; it has nothing to defer to."
            )

        return level
