from django.urls import path
from . import views

app_name = 'ledger'

urlpatterns = [
    # GET /v1/balances/{group}                       - Member balances
    # GET /v1/refunds/{group}?simplified=true|false  - Who owes whom
    path('balances/<uuid:group_id>', views.balances, name='balances'),
    path('refunds/<uuid:group_id>', views.refunds, name='refunds'),
]
