"""Request mapping for every catalogue tool: method, path and JSON body sent upstream."""

from __future__ import annotations

from typing import Any

import pytest

from conftest import RESELLER_ID, MockUpstream, reply
from hostcase.foundation.errors import ErrorKind
from hostcase.runtime import Dispatcher
from hostcase.tools import build_registry

R = f"/reseller/{RESELLER_ID}"
P = "/package/7"
PD = {"package_id": "7", "domain_id": "example.com"}
CONTACT = {
    "name": "Ada Lovelace", "address": "1 Analytical Way", "city": "London", "sp": "Greater London",
    "pc": "N1 1AA", "cc": "GB", "telephone": "+44.2000000000", "email": "ada@example.com",
}

# (tool, params, method, path, body)
MAPPINGS: list[tuple[str, dict[str, Any], str, str, Any]] = [
    # account
    ("get_account_balance", {}, "GET", f"{R}/accountBalance", None),
    # domains
    ("list_domains", {}, "GET", "/domain", None),
    ("get_domain_info", {"domain_id": "example.com"}, "GET", f"{R}/domain/example.com", None),
    ("search_domains", {"search_term": "example"}, "GET", "/domain-search/example", None),
    ("register_domain", {"name": "example.com", "years": 2, "contact": CONTACT, "privacy_service": True},
     "POST", f"{R}/addDomain",
     {"name": "example.com", "years": 2, "contact": CONTACT, "privacyService": True}),
    ("get_domain_verification_status", {}, "GET", "/domainVerification", None),
    ("resend_domain_verification_email", PD, "POST", f"{P}/domain/example.com/resendVerificationEmail", {}),
    ("get_domain_periods", {}, "GET", "/domain-period", None),
    ("get_domain_premium_types", {}, "GET", "/domainPremiumType", None),
    ("get_domain_transfer_status", PD, "GET", f"{P}/domain/example.com/pendingTransferStatus", None),
    ("get_domain_auth_code", PD, "GET", f"{P}/domain/example.com/authCode", None),
    ("get_domain_whois", PD, "GET", f"{P}/domain/example.com/whois", None),
    ("set_domain_transfer_lock", {**PD, "enabled": False}, "POST", f"{P}/domain/example.com/canTransfer",
     {"enable": False}),
    ("transfer_domain", {**PD, "transfer_data": {"authCode": "EPP-1", "years": 1}},
     "POST", f"{P}/domain/example.com/transfer", {"authCode": "EPP-1", "years": 1}),
    ("list_subdomains", {"package_id": "7"}, "GET", f"{P}/web/subdomains", None),
    ("create_subdomain", {"package_id": "7", "subdomain": "blog"}, "POST", f"{P}/web/subdomains", {"name": "blog"}),
    ("remove_subdomain", {"package_id": "7", "subdomain": "blog"}, "DELETE", f"{P}/web/subdomains/blog", None),
    # dns
    ("get_dns_records", {"domain_id": "example.com"}, "GET", f"{R}/domain/example.com/dns", None),
    ("update_dns_record", {"domain_id": "example.com", "record_type": "MX", "name": "@",
                           "value": "mail.example.com", "ttl": 600},
     "POST", f"{R}/domain/example.com/dns",
     {"record_type": "MX", "name": "@", "value": "mail.example.com", "ttl": 600}),
    # packages
    ("list_hosting_packages", {}, "GET", "/package", None),
    ("get_hosting_package_info", {"package_id": "7"}, "GET", P, None),
    ("get_hosting_package_web_info", {"package_id": "7"}, "GET", f"{P}/web", None),
    ("get_hosting_package_limits", {"package_id": "7"}, "GET", f"{P}/limits", None),
    ("get_hosting_package_usage", {"package_id": "7"}, "GET", f"{P}/web/usage", None),
    ("get_package_types", {}, "GET", f"{R}/packageTypes", None),
    ("create_hosting_package",
     {"domain_name": "example.com", "package_type": "282", "username": "ada", "password": "s3cret!",
      "documentRoots": {"example.com": "public_html"}, "stack_user": "stack-user:1"},
     "POST", f"{R}/addWeb",
     {"domain_name": "example.com", "package_type": "282", "username": "ada", "password": "s3cret!",
      "documentRoots": {"example.com": "public_html"}, "stackUser": "stack-user:1"}),
    ("delete_hosting_package", {"package_id": "7"}, "DELETE", P, None),
    ("suspend_package", {"package_id": "7", "reason": "abuse report"}, "POST", f"{P}/suspend",
     {"reason": "abuse report"}),
    ("unsuspend_package", {"package_id": "7"}, "POST", f"{P}/unsuspend", {}),
    ("get_php_versions", {"package_id": "7"}, "GET", f"{P}/web/phpVersion", None),
    ("set_php_version", {"package_id": "7", "version": "8.2"}, "POST", f"{P}/web/phpVersion", {"version": "8.2"}),
    ("list_ftp_users", {"package_id": "7"}, "GET", f"{P}/web/ftp", None),
    ("create_ftp_user", {"package_id": "7", "username": "deploy", "password": "pw", "path": "/public_html"},
     "POST", f"{P}/web/ftp", {"username": "deploy", "password": "pw", "path": "/public_html"}),
    # databases
    ("get_mysql_databases", {"package_id": "7"}, "GET", f"{P}/web/mysqlDatabases", None),
    ("get_mysql_users", {"package_id": "7"}, "GET", f"{P}/web/mysqlUsers", None),
    ("get_mssql_databases", {"package_id": "7"}, "GET", f"{P}/web/mssqlDatabases", None),
    ("create_mysql_database", {"package_id": "7", "name": "shop"}, "POST", f"{P}/web/mysqlDatabases",
     {"name": "shop"}),
    ("create_mysql_user", {"package_id": "7", "username": "shop_rw", "password": "pw"},
     "POST", f"{P}/web/mysqlUsers", {"username": "shop_rw", "password": "pw"}),
    # ssl
    ("get_ssl_certificates", {"package_id": "7"}, "GET", f"{P}/web/certificates", None),
    ("add_free_ssl", {"package_id": "7", "domains": ["example.com", "www.example.com"]},
     "POST", f"{P}/web/freeSSL", {"domains": ["example.com", "www.example.com"]}),
    ("get_force_ssl", {"package_id": "7"}, "GET", f"{P}/web/forceSSL", None),
    ("set_force_ssl", {"package_id": "7", "enabled": True}, "POST", f"{P}/web/forceSSL", {"enabled": True}),
    ("add_tls_certificate", {"name": "shop-ev", "period_months": 12, "configuration": {"domains": ["example.com"]}},
     "POST", f"{R}/addTlsCertificate",
     {"name": "shop-ev", "periodMonths": 12, "configuration": {"domains": ["example.com"]}}),
    ("renew_tls_certificate", {"certificate_id": "c-9", "period_months": 24},
     "POST", f"{R}/renewTlsCertificate", {"id": "c-9", "periodMonths": 24}),
    # email
    ("get_email_forwarders", {"package_id": "7", "email_id": "example.com"},
     "GET", f"{P}/email/example.com/forwarder", None),
    ("get_all_email_forwarders", {"package_id": "7"}, "GET", f"{P}/allMailForwarders", None),
    ("create_email_account", {"package_id": "7", "email": "info@example.com", "password": "pw"},
     "POST", f"{P}/email", {"local": "info", "domain": "example.com", "password": "pw"}),
    ("create_email_forwarder",
     {"package_id": "7", "source": "sales@example.com", "destinations": ["ada@example.org"]},
     "POST", f"{P}/email/forwarder",
     {"local": "sales", "domain": "example.com", "destinations": ["ada@example.org"]}),
    ("generate_webmail_url", {"package_id": "7", "email_id": "example.com", "mailbox_id": "m-12"},
     "POST", f"{P}/email/example.com/webmail", {"id": "m-12"}),
    ("get_email_configuration", {"package_id": "7", "email_id": "example.com"},
     "GET", f"{P}/email/example.com", None),
    ("get_mailbox_configuration", {"package_id": "7", "email_id": "example.com"},
     "GET", f"{P}/email/example.com/mailbox", None),
    ("get_email_spam_blacklist", {"package_id": "7", "email_id": "example.com"},
     "GET", f"{P}/email/example.com/spamPolicyListBlacklist", None),
    ("get_email_spam_whitelist", {"package_id": "7", "email_id": "example.com"},
     "GET", f"{P}/email/example.com/spamPolicyListWhitelist", None),
    ("order_premium_mailbox",
     {"mailbox_id": "m11111", "local": "ceo", "domain": "example.com", "for_user": "u-3"},
     "POST", f"{R}/addPremiumMailbox",
     {"configuration": {"id": "m11111", "local": "ceo", "domain": "example.com"}, "forUser": "u-3"}),
    ("renew_premium_mailbox", {"id": "pm-4"}, "POST", f"{R}/renewPremiumMailbox", {"id": "pm-4"}),
]


def test_mapping_table_covers_catalogue() -> None:
    # get_reseller_info only performs the account lookup itself
    assert {m[0] for m in MAPPINGS} | {"get_reseller_info"} == set(build_registry().names())


@pytest.mark.asyncio
@pytest.mark.parametrize(("tool", "params", "method", "path", "body"), MAPPINGS, ids=[m[0] for m in MAPPINGS])
async def test_request_mapping(
    dispatcher: Dispatcher, upstream: MockUpstream,
    tool: str, params: dict[str, Any], method: str, path: str, body: Any,
) -> None:
    upstream.on(method, path, reply(json={"echo": tool}))

    result = await dispatcher.dispatch(tool, params)

    assert result.ok, result.error
    assert result.data == {"echo": tool}
    (request,) = upstream.tool_calls()
    assert request.method == method
    assert request.url.path == path
    assert upstream.body(request) == body


@pytest.mark.asyncio
async def test_search_query_string(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    upstream.on("GET", "/domain-search/example", reply(json=[]))
    await dispatcher.dispatch("search_domains", {"search_term": "example", "suggestions": True,
                                                 "tlds": ["com", "co.uk"]})
    assert dict(upstream.requests[0].url.params) == {"suggestions": "true", "tlds": "com,co.uk"}


@pytest.mark.asyncio
async def test_suspend_without_reason_sends_empty_body(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    upstream.on("POST", f"{P}/suspend", reply(json=True))
    await dispatcher.dispatch("suspend_package", {"package_id": "7"})
    assert upstream.body(upstream.requests[0]) == {}


@pytest.mark.asyncio
async def test_ftp_user_defaults_to_root_path(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    upstream.on("POST", f"{P}/web/ftp", reply(json=True))
    await dispatcher.dispatch("create_ftp_user", {"package_id": "7", "username": "deploy", "password": "pw"})
    assert upstream.body(upstream.requests[0])["path"] == "/"


@pytest.mark.asyncio
async def test_premium_mailbox_without_user_omits_for_user(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    upstream.on("POST", f"{R}/addPremiumMailbox", reply(json=True))

    result = await dispatcher.dispatch(
        "order_premium_mailbox", {"mailbox_id": "m11111", "local": "ceo", "domain": "Example.com"},
    )

    assert result.ok, result.error
    (request,) = upstream.tool_calls()
    assert upstream.body(request) == {"configuration": {"id": "m11111", "local": "ceo", "domain": "example.com"}}

@pytest.mark.asyncio
async def test_identifiers_are_escaped(dispatcher: Dispatcher, upstream: MockUpstream) -> None:
    await dispatcher.dispatch("get_hosting_package_info", {"package_id": "7/../admin"})
    assert upstream.requests[0].url.raw_path == b"/package/7%2F..%2Fadmin"


@pytest.mark.asyncio
@pytest.mark.parametrize(("tool", "params", "path"), [
    ("add_free_ssl", {"package_id": "7", "domains": []}, "domains"),
    ("add_free_ssl", {"package_id": "7", "domains": ["not a domain"]}, "domains[0]"),
    ("create_email_forwarder", {"package_id": "7", "source": "sales@example.com", "destinations": ["nope"]},
     "destinations[0]"),
    ("update_dns_record", {"domain_id": "example.com", "record_type": "SPF", "name": "@", "value": "v"},
     "record_type"),
    ("register_domain", {"name": "example.com", "years": 1, "contact": {**CONTACT, "email": "ada"}},
     "contact.email"),
    ("set_force_ssl", {"package_id": "7", "enabled": "yes"}, "enabled"),
    ("add_tls_certificate", {"name": "shop-ev", "period_months": 0, "configuration": {}}, "period_months"),
    ("renew_tls_certificate", {"certificate_id": "c-9", "period_months": True}, "period_months"),
    ("order_premium_mailbox", {"mailbox_id": "m1", "local": "ceo", "domain": "not a domain"}, "domain"),
    ("create_subdomain", {"package_id": "7", "subdomain": "  "}, "subdomain"),
])
async def test_tool_specific_validation(
    dispatcher: Dispatcher, upstream: MockUpstream, tool: str, params: dict[str, Any], path: str,
) -> None:
    result = await dispatcher.dispatch(tool, params)

    assert result.error.kind is ErrorKind.VALIDATION
    assert path in result.error.paths()
    assert upstream.requests == []
