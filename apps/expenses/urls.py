from django.urls import path
from . import views

app_name = 'expenses'

urlpatterns = [
    # POST   /v1/expenses                          - Record expense
    # GET    /v1/expenses/{group}                  - List group expenses
    # GET    /v1/expenses/{group}/{expense}        - Get expense
    # PATCH  /v1/expenses/{group}/{expense}        - Update expense (creator)
    # DELETE /v1/expenses/{group}/{expense}        - Delete expense (creator)
    # DELETE /v1/expenses/{group}/{expense}/attachment - Remove attachment (creator)
    path('expenses', views.create, name='create'),
    path('expenses/<uuid:group_id>', views.group_expenses, name='group-expenses'),
    path('expenses/<uuid:group_id>/<uuid:expense_id>', views.expense_detail, name='detail'),
    path(
        'expenses/<uuid:group_id>/<uuid:expense_id>/attachment',
        views.remove_attachment,
        name='attachment'
    ),
]
