"""
Service layer unit tests for expenses app.

Tests cover:
- Cent-precise splitting
- Amount, category and recipient validation
- Creator-only changes
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from apps.expenses.models import Expense, ExpenseCategory, ExpenseShare
from apps.expenses.services import (
    calculate_shares,
    parse_amount,
    create_expense,
    get_group_expenses,
    get_expense,
    update_expense,
    delete_expense,
    delete_attachment,
)
from apps.expenses.services.exceptions import (
    InvalidAmountError,
    InvalidCategoryError,
    InvalidRecipientError,
    InvalidAttachmentError,
    ExpenseNotFoundError,
    NotExpenseCreatorError,
)
from apps.groups.models import MembershipStatus
from apps.groups.services import exclude_member
from apps.groups.services.exceptions import NotMemberError
from apps.expenses.tests.conftest import add_member


def shares_of(expense):
    return [
        (share.user.pseudonym, share.amount)
        for share in ExpenseShare.objects.filter(expense=expense).select_related('user')
    ]


# =============================================================================
# Splitting
# =============================================================================

class TestCalculateShares:

    def test_even_split(self):
        shares = calculate_shares(Decimal('30.00'), ['a', 'b'])

        assert shares == [('a', Decimal('15.00')), ('b', Decimal('15.00'))]

    def test_remainder_goes_to_first_recipients(self):
        shares = calculate_shares(Decimal('10.00'), ['a', 'b', 'c'])

        assert [amount for _, amount in shares] == [
            Decimal('3.34'), Decimal('3.33'), Decimal('3.33')
        ]

    def test_two_cent_remainder(self):
        shares = calculate_shares(Decimal('0.05'), ['a', 'b', 'c'])

        assert [amount for _, amount in shares] == [
            Decimal('0.02'), Decimal('0.02'), Decimal('0.01')
        ]

    def test_shares_always_sum_to_amount(self):
        for cents in (1, 7, 100, 999, 12345):
            amount = Decimal(cents) / 100
            for count in range(1, 8):
                shares = calculate_shares(amount, list(range(count)))
                assert sum(share for _, share in shares) == amount

    def test_requires_recipients(self):
        with pytest.raises(InvalidRecipientError):
            calculate_shares(Decimal('10.00'), [])


class TestParseAmount:

    @pytest.mark.parametrize('value,expected', [
        ('12.5', Decimal('12.50')),
        (30, Decimal('30.00')),
        (Decimal('0.01'), Decimal('0.01')),
        (' 9.00 ', Decimal('9.00')),
    ])
    def test_valid_amounts(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize('value', [
        '0', '-5', 'abc', '', 'NaN', 'Infinity', '1.234', True, None, '100000000.00',
    ])
    def test_invalid_amounts(self, value):
        with pytest.raises(InvalidAmountError):
            parse_amount(value)


# =============================================================================
# Expense Management
# =============================================================================

@pytest.mark.django_db
class TestCreateExpense:

    def test_defaults_to_all_accepted_members(self, group, alice, bob, carol):
        add_member(group, carol, status=MembershipStatus.INVITED)

        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        assert expense.category == ExpenseCategory.NO_CATEGORY
        assert shares_of(expense) == [('alice', Decimal('15.00')), ('bob', Decimal('15.00'))]

    def test_explicit_recipients_keep_order(self, group, alice, bob, carol):
        add_member(group, carol)

        expense = create_expense(
            group_id=group.id,
            creator=alice,
            title='Taxi',
            amount=Decimal('10.00'),
            category='Transport',
            refund_recipients=[carol.id, bob.id],
        )

        assert shares_of(expense) == [('carol', Decimal('5.00')), ('bob', Decimal('5.00'))]
        assert expense.get_recipient_ids() == [carol.id, bob.id]

    def test_creator_only_included_when_listed(self, group, alice, bob):
        expense = create_expense(
            group_id=group.id,
            creator=alice,
            title='Gift',
            amount='20.00',
            refund_recipients=[str(bob.id)],
        )

        assert shares_of(expense) == [('bob', Decimal('20.00'))]

    def test_creator_must_be_member(self, group, carol):
        with pytest.raises(NotMemberError):
            create_expense(group_id=group.id, creator=carol, title='Sneaky', amount='5.00')

    def test_invalid_category(self, group, alice):
        with pytest.raises(InvalidCategoryError):
            create_expense(group_id=group.id, creator=alice, title='Boat', amount='5.00', category='Yachts')

    def test_empty_recipients(self, group, alice):
        with pytest.raises(InvalidRecipientError):
            create_expense(group_id=group.id, creator=alice, title='Air', amount='5.00', refund_recipients=[])

    def test_repeated_recipient(self, group, alice, bob):
        with pytest.raises(InvalidRecipientError):
            create_expense(
                group_id=group.id,
                creator=alice,
                title='Twice',
                amount='5.00',
                refund_recipients=[bob.id, bob.id],
            )

    def test_pending_invitee_cannot_be_recipient(self, group, alice, carol):
        add_member(group, carol, status=MembershipStatus.INVITED)

        with pytest.raises(InvalidRecipientError):
            create_expense(
                group_id=group.id,
                creator=alice,
                title='Early',
                amount='5.00',
                refund_recipients=[carol.id],
            )
        assert not Expense.objects.exists()

    def test_invalid_amount_writes_nothing(self, group, alice):
        with pytest.raises(InvalidAmountError):
            create_expense(group_id=group.id, creator=alice, title='Free', amount='0')

        assert not Expense.objects.exists()

    def test_attachment_must_be_base64(self, group, alice):
        with pytest.raises(InvalidAttachmentError):
            create_expense(
                group_id=group.id,
                creator=alice,
                title='Receipt',
                amount='5.00',
                attachment={'filename': 'receipt.png', 'content': 'not base64!'},
            )

    def test_attachment_stored(self, group, alice):
        expense = create_expense(
            group_id=group.id,
            creator=alice,
            title='Receipt',
            amount='5.00',
            attachment={'filename': 'receipt.txt', 'content': 'aGVsbG8='},
        )

        assert expense.has_attachment
        assert expense.attachment_content == 'aGVsbG8='


@pytest.mark.django_db
class TestReadExpenses:

    def test_list_newest_first(self, group, alice, bob):
        first = create_expense(group_id=group.id, creator=alice, title='First', amount='1.00')
        second = create_expense(group_id=group.id, creator=bob, title='Second', amount='2.00')

        expenses = list(get_group_expenses(group_id=group.id, user=bob))

        assert expenses == [second, first]

    def test_list_hidden_from_outsiders(self, group, carol):
        with pytest.raises(NotMemberError):
            get_group_expenses(group_id=group.id, user=carol)

    def test_get_expense_from_other_group(self, group, alice):
        with pytest.raises(ExpenseNotFoundError):
            get_expense(group_id=group.id, expense_id=uuid4(), user=alice)


@pytest.mark.django_db
class TestUpdateExpense:

    def test_only_creator_may_update(self, group, alice, bob):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        with pytest.raises(NotExpenseCreatorError):
            update_expense(group_id=group.id, expense_id=expense.id, user=bob, title='Mine')

    def test_amount_change_resplits(self, group, alice):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        update_expense(group_id=group.id, expense_id=expense.id, user=alice, amount='10.01')

        assert shares_of(expense) == [('alice', Decimal('5.01')), ('bob', Decimal('5.00'))]

    def test_amount_change_keeps_former_member(self, group, alice, bob):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')
        exclude_member(group_id=group.id, user_id=bob.id, excluded_by=alice)

        update_expense(group_id=group.id, expense_id=expense.id, user=alice, amount='20.00')

        assert shares_of(expense) == [('alice', Decimal('10.00')), ('bob', Decimal('10.00'))]

    def test_new_recipients_must_be_members(self, group, alice, bob):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')
        exclude_member(group_id=group.id, user_id=bob.id, excluded_by=alice)

        with pytest.raises(InvalidRecipientError):
            update_expense(
                group_id=group.id,
                expense_id=expense.id,
                user=alice,
                refund_recipients=[alice.id, bob.id],
            )

    def test_recipients_change_resplits(self, group, alice, bob):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        update_expense(
            group_id=group.id,
            expense_id=expense.id,
            user=alice,
            refund_recipients=[bob.id],
        )

        assert shares_of(expense) == [('bob', Decimal('30.00'))]

    def test_mark_refunded_keeps_shares(self, group, alice):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        updated = update_expense(group_id=group.id, expense_id=expense.id, user=alice, is_refunded=True)

        assert updated.is_refunded is True
        assert len(shares_of(expense)) == 2

    def test_update_validates_category(self, group, alice):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        with pytest.raises(InvalidCategoryError):
            update_expense(group_id=group.id, expense_id=expense.id, user=alice, category='Nope')


@pytest.mark.django_db
class TestDeleteExpense:

    def test_creator_deletes(self, group, alice):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        delete_expense(group_id=group.id, expense_id=expense.id, user=alice)

        assert not Expense.objects.filter(id=expense.id).exists()
        assert not ExpenseShare.objects.filter(expense_id=expense.id).exists()

    def test_other_member_cannot_delete(self, group, alice, bob):
        expense = create_expense(group_id=group.id, creator=alice, title='Rent', amount='30.00')

        with pytest.raises(NotExpenseCreatorError):
            delete_expense(group_id=group.id, expense_id=expense.id, user=bob)

    def test_delete_attachment_is_idempotent(self, group, alice):
        expense = create_expense(
            group_id=group.id,
            creator=alice,
            title='Receipt',
            amount='5.00',
            attachment={'filename': 'receipt.txt', 'content': 'aGVsbG8='},
        )

        delete_attachment(group_id=group.id, expense_id=expense.id, user=alice)
        again = delete_attachment(group_id=group.id, expense_id=expense.id, user=alice)

        assert again.has_attachment is False
        assert again.attachment_content == ''
