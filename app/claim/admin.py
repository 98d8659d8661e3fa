from django.contrib import admin
from .models import Approver, ExpenseClaim

admin.site.register(Approver)
admin.site.register(ExpenseClaim)
