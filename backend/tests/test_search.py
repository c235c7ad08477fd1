from datetime import date

from benefitpoint.repositories.accounts_repo import AccountsRepo
from benefitpoint.services.filters import PlanFilters


def test_search_matches_account_name_case_insensitively(db, make_account, make_plan):
    grind = make_account(account="The Daily Grind")
    other = make_account(account="Acme Bakery")
    make_plan(account=grind)
    make_plan(account=other, carrier="Aetna")

    plans, total = AccountsRepo(db).search_plans_with_accounts("daily grind")

    assert total == 1
    assert plans[0].account_name == "The Daily Grind"


def test_search_matches_carrier_plan_type_and_policy_number(db, make_plan):
    make_plan(carrier="Kaiser Permanente", plan_type="Medical HMO", policy_group_number="KP-001")
    make_plan(carrier="VSP", plan_type="Vision", policy_group_number="V-778")

    repo = AccountsRepo(db)

    assert repo.search_plans_with_accounts("KAISER")[1] == 1
    assert repo.search_plans_with_accounts("vision")[1] == 1
    assert repo.search_plans_with_accounts("v-778")[0][0].carrier == "VSP"


def test_blank_search_returns_everything(db, make_plan):
    make_plan()
    make_plan(carrier="Aetna")

    plans, total = AccountsRepo(db).search_plans_with_accounts("   ")

    assert total == 2
    assert len(plans) == 2


def test_search_keeps_other_filters(db, make_account, make_plan):
    grind = make_account(account="The Daily Grind")
    make_plan(account=grind, carrier="Aetna")
    make_plan(account=grind, carrier="Cigna")

    # The search term on the filter object is ignored; the argument is used
    filters = PlanFilters(search_term="no-such-text", carrier="Cigna")
    plans, total = AccountsRepo(db).search_plans_with_accounts("grind", filters)

    assert total == 1
    assert plans[0].carrier == "Cigna"


def test_search_with_no_matches(db, make_plan):
    make_plan()

    plans, total = AccountsRepo(db).search_plans_with_accounts("zzz")

    assert plans == []
    assert total == 0


def test_plans_are_returned_newest_effective_first(db, make_plan):
    make_plan(effective_date=date(2023, 1, 1), renewal_date=date(2024, 1, 1))
    make_plan(effective_date=date(2024, 6, 1), renewal_date=date(2025, 6, 1))

    plans, _ = AccountsRepo(db).search_plans_with_accounts("")

    assert [p.effective_date for p in plans] == [date(2024, 6, 1), date(2023, 1, 1)]


def test_search_pages_over_matches_not_rows(db, make_account, make_plan):
    make_plan(
        account=make_account(account="Acme Bakery"),
        effective_date=date(2024, 6, 1),
        renewal_date=date(2025, 6, 1),
    )
    make_plan(
        account=make_account(account="The Daily Grind"),
        effective_date=date(2023, 6, 1),
        renewal_date=date(2024, 6, 1),
    )

    repo = AccountsRepo(db)
    plans, total = repo.search_plans_with_accounts("grind", PlanFilters(offset=0, limit=1))

    assert total == 1
    assert [p.account_name for p in plans] == ["The Daily Grind"]
    assert repo.search_plans_with_accounts("grind", PlanFilters(offset=1, limit=1)) == ([], 1)


def test_blank_search_is_paged_with_full_total(db, make_plan):
    for carrier in ("Aetna", "Cigna", "VSP"):
        make_plan(carrier=carrier)

    plans, total = AccountsRepo(db).search_plans_with_accounts("", PlanFilters(offset=2, limit=2))

    assert total == 3
    assert len(plans) == 1
