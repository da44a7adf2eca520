# app/services/invoice_renderer.py
"""
Fixed-layout tax invoice, rendered as plain text from a saved bill.

Sections, top to bottom: title, shop header, invoice no/date, consignee,
line items (vehicle + serial numbers), tax summary, signatures, battery
guidelines, free/paid service schedule.
"""

import calendar
from datetime import date, datetime

from app.config import settings
from app.schemas.sale import BillRecord
from app.services.tax_service import format_amount, amount_in_words

WIDTH = 72

BATTERY_GUIDELINES = [
    "Battery should not be over charged, if it is seen that the battery is bulging "
    "then the warranty will be terminated.",
    "Get all the batteries balanced by rotating in every 3 months from your nearest dealer.",
    "Keep the batteries away from water. Do not wash batteries. Batteries are sealed "
    "do not attempt to add acid.",
    "Do not accelerate and brake abruptly. Do not over load the scooter. Keep batteries "
    "cool. Charge under shade.",
    "Once a month, Discharge battery fully and Charge battery fully. Charge after "
    "at-least 30 minutes of a long drive.",
]

# (label, months after the bill date)
SERVICE_SCHEDULE = [
    ("FIRST free SERVICE 500 KM", 2),
    ("SECOND free SERVICE 2000KM", 4),
    ("Third Paid SERVICE 4000 KM", 6),
    ("Fourth Paid SERVICE 6000 KM", 8),
]


def add_months(start: date, months: int) -> date:
    """Same day N months later, clamped to the month's last day (31 Jan + 1 -> 28/29 Feb)."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def format_date(value: date) -> str:
    """en-IN short date: 5/3/2025."""
    return f"{value.day}/{value.month}/{value.year}"


def _parse_bill_date(bill: BillRecord) -> date:
    try:
        return date.fromisoformat(bill.date)
    except ValueError:
        return (bill.created_at or datetime.utcnow()).date()


def _or_dash(value) -> str:
    return value if value else "-"


def render_invoice(bill: BillRecord) -> str:
    bill_date = _parse_bill_date(bill)
    rule = "-" * WIDTH
    lines = [
        "Tax Invoice".center(WIDTH),
        rule,
        settings.SHOP_NAME,
        *settings.SHOP_ADDRESS_LINES,
        f"GSTIN NO={settings.SHOP_GSTIN}",
        f"Invoice no: {bill.bill_number}",
        f"Date: {format_date(bill_date)}",
        rule,
        f"CONSIGNEE: {bill.customer_name}",
        f"MOB NO: {_or_dash(bill.customer_contact)}",
        f"Address: {_or_dash(bill.customer_address)}",
        rule,
        f"{'SR NO':<6}{'Particulars':<28}{'RATE':>10}{'QTY':>5}{'HSN/SAC':>10}{'TOTAL':>13}",
        (f"{'01':<6}{(bill.vehicle_name or 'Electric Vehicle')[:27]:<28}"
         f"{'₹' + format_amount(bill.selling_price):>10}{bill.quantity:>5}"
         f"{settings.HSN_CODE:>10}{'₹' + format_amount(bill.total_amount):>13}"),
        f"{'':<6}Model: {_or_dash(bill.vehicle_model)}",
    ]
    if bill.engine_capacity:
        lines.append(f"{'':<6}Engine: {bill.engine_capacity}")
    lines += [
        f"{'02':<6}{'MOTOR NO':<28}{bill.motor_no or ''}",
        f"{'03':<6}{'CHASSIS NO':<28}{bill.chassis_no or ''}",
        f"{'04':<6}{'BATTERY NO':<28}{_or_dash(bill.battery_no)}",
        f"{'05':<6}{'CONTROLLER NO':<28}{_or_dash(bill.controller_no)}",
        rule,
        f"• CGST 2.5% : ₹{format_amount(bill.cgst)}",
        f"• SGST 2.5% : ₹{format_amount(bill.sgst)}",
        f"IN WORDS : {amount_in_words(bill.final_amount)}",
        f"{'TOTAL':<20}₹{format_amount(bill.total_amount)}",
        f"{'GST 5%':<20}₹{format_amount(bill.cgst + bill.sgst)}",
        f"{'GRAND TOTAL':<20}₹{format_amount(bill.final_amount)}",
        rule,
        f"{'CUSTOMER SIGNATURE':<40}FOR {settings.SHOP_NAME}",
        f"{'':<40}Proprietor",
        rule,
        "Battery Usage Guidelines:",
        *[f"- {line}" for line in BATTERY_GUIDELINES],
        rule,
        f"FOR SERVICE RELATED ISSUE CALL {settings.SHOP_CONTACT}",
    ]
    for n, (label, months) in enumerate(SERVICE_SCHEDULE, start=1):
        due = format_date(add_months(bill_date, months))
        lines.append(f"{n}:- {label} OR {months} MONTHS WHICHEVER COMES FIRST {due}")
    return "\n".join(lines) + "\n"
