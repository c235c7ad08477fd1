from datetime import date, timedelta

from benefitpoint.models import Carrier


def test_health_and_root(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["message"] == "BenefitPoint API"


def test_list_accounts_uses_camel_case(client, make_account):
    make_account(account="The Daily Grind", state="CA")

    response = client.get("/api/accounts", params={"search": "grind"})

    assert response.status_code == 200
    body = response.json()
    assert body["totalCount"] == 1
    assert body["success"] is True
    account = body["accounts"][0]
    assert account["accountName"] == "The Daily Grind"
    assert account["officeDivision"] == "CA"
    assert account["primarySalesLead"] == "TBD"


def test_create_and_patch_account(client):
    created = client.post("/api/accounts", json={"accountName": "Acme Bakery", "state": "NV", "flatFee": 10})
    assert created.status_code == 201
    account_id = created.json()["accountId"]

    patched = client.patch(f"/api/accounts/{account_id}", json={"state": "AZ"})

    assert patched.status_code == 200
    assert patched.json()["state"] == "AZ"
    assert patched.json()["accountName"] == "Acme Bakery"
    assert patched.json()["flatFee"] == 10


def test_missing_account_is_404_with_detail(client):
    response = client.get("/api/accounts/12345")

    assert response.status_code == 404
    assert response.json() == {"detail": "Account not found"}


def test_account_dashboard_by_id_and_name(client, make_account, make_plan):
    account = make_account(account="The Daily Grind")
    make_plan(account=account, carrier="Aetna")
    make_plan(account=account, carrier="Aetna", plan_type="Vision", status="pending")

    by_id = client.get("/api/accounts/dashboard", params={"accountId": account.account_id}).json()
    by_name = client.get("/api/accounts/dashboard", params={"account": "daily grind"}).json()

    assert by_id["summary"] == {
        "totalPlans": 2,
        "activePlans": 1,
        "carrierBreakdown": {"Aetna": 2},
        "planTypeBreakdown": {"Medical PPO": 1, "Vision": 1},
    }
    assert by_name["account"]["accountId"] == account.account_id
    assert client.get("/api/accounts/dashboard").status_code == 400


def test_plan_search_endpoint(client, make_account, make_plan):
    make_plan(account=make_account(account="The Daily Grind"))
    make_plan(account=make_account(account="Acme Bakery"), carrier="Aetna")

    body = client.get("/api/plans/search", params={"q": "DAILY"}).json()

    assert body["totalCount"] == 1
    assert body["plans"][0]["accountName"] == "The Daily Grind"
    assert body["plans"][0]["planName"] == "Blue Shield of California Medical PPO"


def test_plan_crud(client, make_account):
    account = make_account()
    payload = {
        "accountId": account.account_id,
        "carrier": "Cigna",
        "planType": "Medical HMO",
        "effectiveDate": "2025-01-01",
        "renewalDate": "2026-01-01",
    }

    created = client.post("/api/plans", json=payload)
    assert created.status_code == 201
    plan_id = created.json()["planId"]

    status = client.patch(f"/api/plans/{plan_id}/status", json={"status": "pending"})
    assert status.json()["status"] == "pending"

    client.delete(f"/api/plans/{plan_id}")
    assert client.get(f"/api/plans/{plan_id}").json()["status"] == "cancelled"


def test_create_plan_for_unknown_account(client):
    response = client.post("/api/plans", json={
        "accountId": 999,
        "carrier": "Cigna",
        "planType": "Medical HMO",
        "effectiveDate": "2025-01-01",
        "renewalDate": "2026-01-01",
    })

    assert response.status_code == 404


def test_dashboard_summary_endpoint(client, make_plan):
    today = date.today()
    make_plan(effective_date=today - timedelta(days=350), renewal_date=today + timedelta(days=15))
    make_plan(effective_date=today - timedelta(days=10), renewal_date=today + timedelta(days=355))

    body = client.get("/api/dashboard/summary").json()

    assert body["plans"] == {"upForRenewal": 1, "expiredNoAction": 0, "newBusiness": 1}
    assert body["products"] == body["plans"]
    assert body["recordAssignments"] == {"dueToday": 0, "pastDue": 0, "upcoming": 0}


def test_upcoming_renewals_endpoint(client, make_plan):
    today = date.today()
    make_plan(renewal_date=today + timedelta(days=5))
    make_plan(renewal_date=today + timedelta(days=60))

    assert len(client.get("/api/plans/upcoming-renewals").json()) == 1
    assert len(client.get("/api/plans/upcoming-renewals", params={"days": 90}).json()) == 2


def test_plan_config_endpoints(client, make_plan):
    plan = make_plan()

    assert client.get(f"/api/plans/{plan.plan_id}/config").status_code == 404

    saved = client.post(f"/api/plans/{plan.plan_id}/config", json={
        "carrier": "Aetna",
        "billingType": "List Bill",
        "planName": "Aetna Dental",
        "effectiveDate": "2025-01-01",
    })
    assert saved.status_code == 201

    fetched = client.get(f"/api/plans/{plan.plan_id}/config").json()
    assert fetched["planName"] == "Aetna Dental"
    assert fetched["funding"] == "Fully Insured"
    assert fetched["planId"] == plan.plan_id


def test_carrier_endpoints(client, make_carrier):
    aetna = make_carrier("Aetna")
    make_carrier("Cigna")

    assert client.get("/api/carriers").json()["totalCount"] == 2

    deleted = client.delete(f"/api/carriers/{aetna.carrier_id}")
    assert deleted.json()["isActive"] is False

    active = client.get("/api/carriers/active").json()
    assert [c["companyName"] for c in active] == ["Cigna"]


def test_plan_types_endpoint(client, make_plan_type):
    make_plan_type("Vision", "Vision")

    body = client.get("/api/plan-types").json()

    assert body == [{"id": 1, "name": "Vision", "category": "Vision"}]
    assert client.get("/api/plan-types/99").status_code == 404


def test_login_stub_always_succeeds(client):
    response = client.post("/api/auth/login", json={"username": "anyone", "password": "x"})

    assert response.json() == {"success": True, "redirectTo": "/dashboard"}


def test_wizard_new_plan_over_http(client, make_account):
    account = make_account()

    started = client.get("/api/wizard/add-plan", params={"accountId": account.account_id}).json()
    assert started["step"] == "select_plan_type"

    params = {**started["params"], "newType": "Vision"}
    typed = client.post("/api/wizard/plan-type", params=params).json()
    assert typed["step"] == "configure_plan"

    params = {
        **typed["params"],
        "carrier": "VSP",
        "billingType": "Direct Bill",
        "planName": "VSP Vision",
        "effectiveDate": "2020-01-01",
    }
    configured = client.post("/api/wizard/configure", params=params).json()
    assert configured["step"] == "review"
    assert configured["configuration"]["carrier"] == "VSP"

    reviewed = client.get("/api/wizard/review", params=configured["params"])
    assert reviewed.status_code == 200

    saved = client.post("/api/wizard/save", params=configured["params"])
    assert saved.status_code == 201
    body = saved.json()
    assert body["step"] == "saved"
    assert body["plan"]["carrier"] == "VSP"
    assert body["plan"]["status"] == "active"
    assert body["params"]["savedPlanId"] == str(body["plan"]["planId"])


def test_wizard_replacement_over_http(client, make_plan):
    original = make_plan()

    started = client.get("/api/wizard/replace-plan", params={"replaceId": original.plan_id}).json()
    assert started["step"] == "select_target_plan"
    assert started["params"]["originalCarrier"] == "Blue Shield of California"

    targeted = client.post("/api/wizard/select-target", params={**started["params"], "includeSplits": "No"}).json()
    assert targeted["params"]["includeSplits"] == "No"

    typed = client.post("/api/wizard/plan-type", params={**targeted["params"], "replaceType": "Dental PPO"}).json()
    configured = client.post("/api/wizard/configure", params=typed["params"]).json()
    saved = client.post("/api/wizard/save", params=configured["params"]).json()

    assert saved["plan"]["carrier"] == "TBD"
    assert saved["plan"]["status"] == "pending_configuration"
    assert saved["plan"]["planType"] == "Dental PPO"
    assert client.get(f"/api/plans/{original.plan_id}").json()["status"] == "active"


def test_wizard_rejects_bad_params(client):
    response = client.post("/api/wizard/configure", params={"step": "configure_plan", "effectiveDate": "tomorrow"})

    assert response.status_code == 400
    assert "effectiveDate" in response.json()["detail"]


def test_wizard_strict_configure_reports_missing_fields(client):
    params = {
        "step": "configure_plan",
        "newType": "Vision",
        "carrier": "VSP",
        "billingType": "Direct Bill",
        "planName": "VSP Vision",
        "effectiveDate": "2025-01-01",
    }

    assert client.post("/api/wizard/configure", params=params).status_code == 200
    strict = client.post("/api/wizard/configure", params={**params, "strict": "true"})
    assert strict.status_code == 400
    assert strict.json()["detail"].startswith("Missing required fields: originalPlanEffectiveDate")


def test_wizard_back(client):
    response = client.post("/api/wizard/back", params={"step": "review", "newType": "Vision"})

    assert response.json()["step"] == "configure_plan"


def test_replacement_validation_endpoints(client, make_plan):
    original = make_plan()
    config = {
        "originalPlanId": original.plan_id,
        "accountId": original.account_id,
        "replacementPlanTypeName": "Vision",
    }

    assert client.post("/api/wizard/validate-replacement", json=config).json()["valid"] is True
    missing = client.post("/api/wizard/validate-replacement", json={**config, "originalPlanId": None})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Original plan ID is required"

    created = client.post("/api/wizard/create-replacement", json=config)
    assert created.status_code == 201
    assert created.json()["carrier"] == "TBD"

    cancelled = client.post(f"/api/plans/{created.json()['planId']}/cancel-replacement")
    assert cancelled.json()["status"] == "cancelled"


def test_patch_with_null_required_field_is_400(client, make_plan):
    plan = make_plan()

    response = client.patch(f"/api/plans/{plan.plan_id}", json={"status": None})

    assert response.status_code == 400
    assert response.json() == {"detail": "Status is required"}
    assert client.get(f"/api/plans/{plan.plan_id}").json()["status"] == "active"


def test_null_account_name_and_carrier_name_are_400(client, make_account, make_carrier):
    account = make_account()
    carrier = make_carrier("Aetna")

    renamed = client.patch(f"/api/accounts/{account.account_id}", json={"accountName": None})
    assert renamed.status_code == 400
    assert renamed.json()["detail"] == "Account name is required"

    cleared = client.patch(f"/api/carriers/{carrier.carrier_id}", json={"companyName": None})
    assert cleared.status_code == 400
    assert cleared.json()["detail"] == "Company name is required"


def test_database_errors_do_not_leak_sql(client, engine):
    Carrier.__table__.drop(engine)

    response = client.get("/api/carriers")

    assert response.status_code == 502
    assert response.json() == {"detail": "Database error: fetching carriers failed"}
