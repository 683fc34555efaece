"""
The billing RPC surface.

Every request names one member of the closed ``Action`` enum. Each action
owns a payload form (its typed input) and a handler returning JSON-ready
data; ``dispatch`` validates the payload and calls the handler.
"""
import enum
from collections import namedtuple
from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder

from . import accounts, reports, services
from . import forms as payloads
from .exceptions import ValidationError


class Action(str, enum.Enum):
    GET_ALL_USERS           = 'getAllUsers'
    GET_USER_BY_ID          = 'getUserById'
    REGISTER_USER           = 'registerUser'
    LOGIN_USER              = 'loginUser'
    CHANGE_PASSWORD         = 'changePassword'
    FORGOT_PASSWORD_RESET   = 'forgotPasswordReset'
    RESET_PASSWORD_BY_ADMIN = 'resetPasswordByAdmin'
    UPDATE_USER             = 'updateUser'
    UPDATE_USER_ROLE        = 'updateUserRole'
    GET_READINGS_FOR_USER   = 'getReadingsForUser'
    GET_BILLS_FOR_USER      = 'getBillsForUser'
    GET_LATEST_BILL_FOR_USER = 'getLatestBillForUser'
    ADD_METER_READING       = 'addMeterReading'
    PAY_BILL                = 'payBill'
    GET_ALL_ANNOUNCEMENTS   = 'getAllAnnouncements'
    ADD_ANNOUNCEMENT        = 'addAnnouncement'
    GET_ALL_PENDING_BILLS   = 'getAllPendingBills'
    GET_INVOICE_SUMMARY     = 'getInvoiceSummary'
    APPROVE_PAYMENT         = 'approvePayment'
    REJECT_PAYMENT          = 'rejectPayment'
    GET_SYSTEM_REPORT_DATA  = 'getSystemReportData'
    GET_WATER_PRICE         = 'getWaterPrice'
    SET_WATER_PRICE         = 'setWaterPrice'


class UnknownAction(Exception):
    pass


class BillingJSONEncoder(DjangoJSONEncoder):
    """Money and readings go out as JSON numbers; models as their dict form."""

    def default(self, o):
        if isinstance(o, Decimal):
            return float(o)
        if hasattr(o, 'to_dict'):
            return o.to_dict()
        return super().default(o)


# ══════════════════════════════════════════════════════════
#   Handlers - one per action, each takes the cleaned payload
# ══════════════════════════════════════════════════════════
def register_user(data):
    return accounts.register_account(
        name         = data['name'],
        address      = data['address'],
        phone_number = data['phoneNumber'],
        password     = data['password'],
    )


def update_user(data):
    return accounts.update_account(data['id'], **data['changes'])


def forgot_password_reset(data):
    account, temp_password = accounts.forgot_password_reset(data['phoneNumber'])
    return {'user': account, 'tempPass': temp_password}


def add_meter_reading(data):
    reading, bill = services.record_meter_reading(
        account_id  = data['userId'],
        new_value   = data['newReadingValue'],
        proof_image = data.get('meterImage') or None,
    )
    return {'reading': reading, 'bill': bill}


def get_all_pending_bills(data):
    return [{'bill': bill, 'user': bill.account} for bill in services.get_all_pending_bills()]


def get_system_report_data(data):
    report = reports.system_report_data()
    report['allBills'] = [
        dict(bill.to_dict(), user={'id': bill.account_id, 'name': bill.account.name})
        for bill in report['allBills']
    ]
    return report


Route = namedtuple('Route', ['payload', 'handler', 'envelope'])

ROUTES = {
    Action.GET_ALL_USERS: Route(
        payloads.EmptyPayload, lambda data: accounts.get_all_accounts(), None),
    Action.GET_USER_BY_ID: Route(
        payloads.AccountIdPayload, lambda data: accounts.get_account(data['id']), None),
    Action.REGISTER_USER: Route(
        payloads.RegisterUserPayload, register_user, 'userData'),
    Action.LOGIN_USER: Route(
        payloads.LoginPayload,
        lambda data: accounts.login_account(data['phoneNumber'], data['password']), None),
    Action.CHANGE_PASSWORD: Route(
        payloads.ChangePasswordPayload,
        lambda data: accounts.change_password(
            data['userId'], data['currentPassword'], data['newPassword']), None),
    Action.FORGOT_PASSWORD_RESET: Route(
        payloads.PhoneNumberPayload, forgot_password_reset, None),
    Action.RESET_PASSWORD_BY_ADMIN: Route(
        payloads.AdminPasswordResetPayload,
        lambda data: accounts.reset_password_by_admin(data['userId'], data['newPassword']), None),
    Action.UPDATE_USER: Route(
        payloads.UpdateUserPayload, update_user, 'updatedUser'),
    Action.UPDATE_USER_ROLE: Route(
        payloads.UpdateRolePayload,
        lambda data: accounts.update_account_role(data['userId'], data['newRole']), None),
    Action.GET_READINGS_FOR_USER: Route(
        payloads.UserIdPayload,
        lambda data: services.get_readings_for_account(data['userId']), None),
    Action.GET_BILLS_FOR_USER: Route(
        payloads.UserIdPayload,
        lambda data: services.get_bills_for_account(data['userId']), None),
    Action.GET_LATEST_BILL_FOR_USER: Route(
        payloads.UserIdPayload,
        lambda data: services.get_latest_bill_for_account(data['userId']), None),
    Action.ADD_METER_READING: Route(
        payloads.MeterReadingPayload, add_meter_reading, None),
    Action.PAY_BILL: Route(
        payloads.BillIdPayload, lambda data: services.pay_bill(data['billId']), None),
    Action.GET_ALL_ANNOUNCEMENTS: Route(
        payloads.EmptyPayload, lambda data: services.get_all_announcements(), None),
    Action.ADD_ANNOUNCEMENT: Route(
        payloads.AnnouncementPayload,
        lambda data: services.add_announcement(data['message']), None),
    Action.GET_ALL_PENDING_BILLS: Route(
        payloads.EmptyPayload, get_all_pending_bills, None),
    Action.GET_INVOICE_SUMMARY: Route(
        payloads.EmptyPayload, lambda data: reports.invoice_summary(), None),
    Action.APPROVE_PAYMENT: Route(
        payloads.BillIdPayload, lambda data: services.approve_payment(data['billId']), None),
    Action.REJECT_PAYMENT: Route(
        payloads.BillIdPayload, lambda data: services.reject_payment(data['billId']), None),
    Action.GET_SYSTEM_REPORT_DATA: Route(
        payloads.EmptyPayload, get_system_report_data, None),
    Action.GET_WATER_PRICE: Route(
        payloads.EmptyPayload, lambda data: services.get_water_price(), None),
    Action.SET_WATER_PRICE: Route(
        payloads.WaterPricePayload, lambda data: services.set_water_price(data['price']), None),
}


def form_errors(form):
    messages = []
    for field, errors in form.errors.items():
        label = 'payload' if field == '__all__' else field
        messages.append(f'{label}: {" ".join(errors)}')
    return '; '.join(messages)


def dispatch(action_name, payload):
    try:
        action = Action(action_name)
    except ValueError:
        raise UnknownAction(f'Unknown API action: {action_name}')

    route = ROUTES[action]
    if route.envelope and isinstance(payload, dict):
        payload = payload.get(route.envelope)
    if not isinstance(payload, dict):
        raise ValidationError('The request payload must be a JSON object.')

    form = route.payload(data=payload)
    if not form.is_valid():
        raise ValidationError(form_errors(form))

    return route.handler(form.cleaned_data)
