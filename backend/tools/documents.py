"""Template-based document generators."""

from application.models import FieldSpec, FieldType, TemplateFill, Tier, ToolDescriptor

PAYMENT_REMINDER_TEMPLATE = """Subject: Friendly reminder: invoice {{invoice_number}}

Hi {{client_name}},

This is a quick reminder that invoice {{invoice_number}} for {{amount}} was due on {{due_date}}.
If you have already sent payment, please disregard this message.

Thank you,
{{sender_name}}
"""

PAYMENT_REMINDER_EMAIL = ToolDescriptor(
    slug="payment-reminder-email",
    name="Payment Reminder Email",
    description="Generate a polite reminder for an overdue invoice",
    category="sales",
    required_tier=Tier.FREE,
    icon="dashicons-email",
    color="#ec4899",
    behavior=TemplateFill(
        template=PAYMENT_REMINDER_TEMPLATE,
        placeholders={
            "client_name": "client_name",
            "invoice_number": "invoice_number",
            "amount": lambda inputs: f"${float(inputs['amount']):,.2f}",
            "due_date": "due_date",
            "sender_name": "sender_name",
        },
    ),
    fields=(
        FieldSpec(name="client_name", label="Client Name", type=FieldType.TEXT),
        FieldSpec(name="invoice_number", label="Invoice Number", type=FieldType.TEXT),
        FieldSpec(name="amount", label="Amount Due ($)", min=0),
        FieldSpec(name="due_date", label="Due Date", type=FieldType.TEXT),
        FieldSpec(name="sender_name", label="Your Name", type=FieldType.TEXT),
    ),
)

DOCUMENT_TOOLS = (PAYMENT_REMINDER_EMAIL,)
