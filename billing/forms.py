from django import forms

from .models import Account


# ──────────────────────────────────────────────────────────
#   Payload forms for the API actions. Field names follow the
#   JSON keys the web client sends.
# ──────────────────────────────────────────────────────────
class EmptyPayload(forms.Form):
    pass


class AccountIdPayload(forms.Form):
    id = forms.IntegerField(min_value=1)


class UserIdPayload(forms.Form):
    userId = forms.IntegerField(min_value=1)


class BillIdPayload(forms.Form):
    billId = forms.IntegerField(min_value=1)


# ──────────────────────────────────────────────────────────
#   FORM 1 - Accounts
# ──────────────────────────────────────────────────────────
class RegisterUserPayload(forms.Form):
    name        = forms.CharField(max_length=200)
    address     = forms.CharField(required=False)
    phoneNumber = forms.CharField(max_length=20)
    password    = forms.CharField(strip=False)


class LoginPayload(forms.Form):
    phoneNumber = forms.CharField(max_length=20)
    password    = forms.CharField(strip=False)


class ChangePasswordPayload(forms.Form):
    userId          = forms.IntegerField(min_value=1)
    currentPassword = forms.CharField(strip=False)
    newPassword     = forms.CharField(strip=False)


class PhoneNumberPayload(forms.Form):
    phoneNumber = forms.CharField(max_length=20)


class AdminPasswordResetPayload(forms.Form):
    userId      = forms.IntegerField(min_value=1)
    newPassword = forms.CharField(strip=False)


class UpdateUserPayload(forms.Form):
    id          = forms.IntegerField(min_value=1)
    name        = forms.CharField(max_length=200, required=False)
    address     = forms.CharField(required=False)
    phoneNumber = forms.CharField(max_length=20, required=False)
    meterId     = forms.CharField(max_length=20, required=False)

    FIELD_MAP = {
        'name':        'name',
        'address':     'address',
        'phoneNumber': 'phone_number',
        'meterId':     'meter_id',
    }

    def changes(self):
        """Only the profile fields the caller actually sent."""
        return {
            attr: self.cleaned_data[key]
            for key, attr in self.FIELD_MAP.items()
            if key in self.data and self.data[key] is not None
        }

    def clean(self):
        cleaned = super().clean()
        for key in ('name', 'phoneNumber', 'meterId'):
            if key in self.data and self.data[key] is not None and not cleaned.get(key):
                self.add_error(key, 'This field cannot be blank.')
        if not self.errors:
            cleaned['changes'] = self.changes()
        return cleaned


class UpdateRolePayload(forms.Form):
    userId  = forms.IntegerField(min_value=1)
    newRole = forms.ChoiceField(choices=Account.ROLE_CHOICES)


# ──────────────────────────────────────────────────────────
#   FORM 2 - Readings & bills
# ──────────────────────────────────────────────────────────
class MeterReadingPayload(forms.Form):
    userId          = forms.IntegerField(min_value=1)
    newReadingValue = forms.DecimalField()
    meterImage      = forms.CharField(required=False, strip=False)


# ──────────────────────────────────────────────────────────
#   FORM 3 - Announcements & price
# ──────────────────────────────────────────────────────────
class AnnouncementPayload(forms.Form):
    message = forms.CharField(required=False)


class WaterPricePayload(forms.Form):
    price = forms.DecimalField()
