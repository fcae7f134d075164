from __future__ import annotations

import pytest

from upnshift.domain.eligibility import (
    RestoreParameters,
    UpdateParameters,
    evaluate,
    evaluate_restore,
    evaluate_update,
)
from upnshift.domain.model import (
    ALREADY_MIGRATED,
    EXCLUDED_SUFFIX,
    MALFORMED_SOURCE_VALUE,
    NO_PRINCIPAL_NAME,
    NOTHING_TO_RESTORE,
    SUFFIX_NOT_PERMITTED,
    Decision,
    DecisionKind,
)
from upnshift.domain.suffixes import SuffixCatalog
from tests.helpers.directory import make_state

CATALOG = SuffixCatalog.of(["contoso.com", "eu.contoso.com", "fabrikam.com"])


def _params(**overrides: object) -> UpdateParameters:
    values: dict[str, object] = {"source_attribute": "alt", "backup_attribute": "backup"}
    values.update(overrides)
    return UpdateParameters(**values)  # type: ignore[arg-type]


def test_update_uses_source_value_verbatim() -> None:
    account = make_state(alt="jdoe@contoso.com")

    assert evaluate_update(account, _params(), CATALOG) == Decision.proceed("jdoe@contoso.com")


def test_update_prepends_subdomain() -> None:
    account = make_state(alt="jdoe@contoso.com")

    decision = evaluate_update(account, _params(subdomain="eu"), CATALOG)

    assert decision == Decision.proceed("jdoe@eu.contoso.com")


def test_update_skips_subdomain_outside_catalog() -> None:
    account = make_state(alt="jdoe@contoso.com")

    decision = evaluate_update(account, _params(subdomain="apac"), CATALOG)

    assert decision == Decision.skip(SUFFIX_NOT_PERMITTED)


def test_update_skips_unknown_suffix() -> None:
    account = make_state(alt="jdoe@northwind.com")

    assert evaluate_update(account, _params(), CATALOG) == Decision.skip(SUFFIX_NOT_PERMITTED)


def test_update_suffix_match_ignores_case() -> None:
    account = make_state(alt="JDoe@CONTOSO.com")

    assert evaluate_update(account, _params(), CATALOG) == Decision.proceed("JDoe@CONTOSO.com")


def test_update_skips_when_backup_present() -> None:
    account = make_state(alt="jdoe@contoso.com", backup="jdoe@fabrikam.com")

    assert evaluate_update(account, _params(), CATALOG) == Decision.skip(ALREADY_MIGRATED)


def test_update_backup_guard_precedes_source_parsing() -> None:
    account = make_state(alt="not-an-upn", backup="jdoe@fabrikam.com")

    assert evaluate_update(account, _params(), CATALOG) == Decision.skip(ALREADY_MIGRATED)


def test_update_keeps_source_whitespace() -> None:
    account = make_state(alt=" jdoe@contoso.com")

    assert evaluate_update(account, _params(), CATALOG) == Decision.proceed(" jdoe@contoso.com")


def test_update_refuses_account_without_principal_name() -> None:
    account = make_state(upn=" ", alt="jdoe@contoso.com")

    assert evaluate_update(account, _params(), CATALOG) == Decision.error(NO_PRINCIPAL_NAME)


@pytest.mark.parametrize("source", ["jdoe.contoso.com", ""])
def test_update_reports_malformed_source(source: str) -> None:
    account = make_state(alt=source)

    assert evaluate_update(account, _params(), CATALOG) == Decision.error(MALFORMED_SOURCE_VALUE)


def test_update_excludes_on_current_suffix_regardless_of_source() -> None:
    account = make_state(upn="jdoe@contoso.com", alt="jdoe@fabrikam.com")

    decision = evaluate_update(account, _params(excluded_suffixes={"Contoso.com"}), CATALOG)

    assert decision == Decision.error(EXCLUDED_SUFFIX)


def test_update_exclusion_precedes_backup_guard() -> None:
    account = make_state(upn="jdoe@contoso.com", alt="jdoe@fabrikam.com", backup="x@y.com")

    decision = evaluate_update(account, _params(excluded_suffixes={"contoso.com"}), CATALOG)

    assert decision.kind is DecisionKind.ERROR


def test_update_exclusion_ignores_source_suffix() -> None:
    account = make_state(upn="jdoe@fabrikam.com", alt="jdoe@contoso.com")

    decision = evaluate_update(account, _params(excluded_suffixes={"contoso.com"}), CATALOG)

    assert decision == Decision.proceed("jdoe@contoso.com")


def test_update_parameters_require_attributes() -> None:
    with pytest.raises(ValueError, match="source attribute"):
        UpdateParameters(source_attribute=" ", backup_attribute="backup")
    with pytest.raises(ValueError, match="backup attribute"):
        UpdateParameters(source_attribute="alt", backup_attribute="")
    with pytest.raises(ValueError, match="Subdomain"):
        UpdateParameters(source_attribute="alt", backup_attribute="backup", subdomain=" . ")


def test_update_parameters_reject_same_source_and_backup() -> None:
    with pytest.raises(ValueError, match="must differ"):
        UpdateParameters(
            source_attribute="extensionAttribute1", backup_attribute="ExtensionAttribute1 "
        )


def test_update_parameters_normalize_subdomain_and_exclusions() -> None:
    params = _params(subdomain=".eu.", excluded_suffixes={" Contoso.COM ", ""})

    assert params.subdomain == "eu"
    assert params.excluded_suffixes == frozenset({"contoso.com"})
    assert params.read_attributes == ("alt", "backup")


def test_restore_proceeds_with_saved_value() -> None:
    account = make_state(upn="jdoe@contoso.com", backup="jdoe@fabrikam.com")

    decision = evaluate_restore(account, RestoreParameters(restore_attribute="backup"))

    assert decision == Decision.proceed("jdoe@fabrikam.com")


def test_restore_keeps_saved_value_verbatim() -> None:
    account = make_state(upn="jdoe@contoso.com", backup="jdoe@fabrikam.com ")

    decision = evaluate_restore(account, RestoreParameters(restore_attribute="backup"))

    assert decision == Decision.proceed("jdoe@fabrikam.com ")


def test_restore_skips_without_saved_value() -> None:
    account = make_state(upn="jdoe@contoso.com")

    decision = evaluate_restore(account, RestoreParameters(restore_attribute="backup"))

    assert decision == Decision.skip(NOTHING_TO_RESTORE)


def test_restore_trusts_value_outside_catalog(caplog: pytest.LogCaptureFixture) -> None:
    account = make_state(upn="jdoe@contoso.com", backup="jdoe@retired.example")

    decision = evaluate_restore(account, RestoreParameters(restore_attribute="backup"), CATALOG)

    assert decision == Decision.proceed("jdoe@retired.example")
    assert "no longer in the catalog" in caplog.text


def test_restore_parameters_require_attribute() -> None:
    with pytest.raises(ValueError, match="restore attribute"):
        RestoreParameters(restore_attribute="")


def test_evaluate_dispatches_on_parameters() -> None:
    account = make_state(alt="jdoe@contoso.com", backup="")

    assert evaluate(account, _params(), CATALOG).should_proceed
    assert evaluate(account, RestoreParameters("backup"), None) == Decision.skip(NOTHING_TO_RESTORE)
    with pytest.raises(ValueError, match="suffix catalog"):
        evaluate(account, _params(), None)
