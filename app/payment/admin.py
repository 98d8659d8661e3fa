from django.contrib import admin
from .models import PaymentHeader, PaymentRecord

admin.site.register(PaymentHeader)
admin.site.register(PaymentRecord)
