"""Shared fixtures for server configuration reader tests."""

import pytest

from appsensor_config.shared import CONFIG_NAMESPACE

FULL_CONFIG_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<config:appsensor-server-config xmlns:config="{CONFIG_NAMESPACE}">
    <config:client-application-identification-header-name>X-Appsensor-Client-Application-Name</config:client-application-identification-header-name>
    <config:correlation-config>
        <config:correlated-client-set>
            <config:client-application-name>server1</config:client-application-name>
            <config:client-application-name> server2 </config:client-application-name>
        </config:correlated-client-set>
    </config:correlation-config>
    <config:event-analyzer class="org.owasp.appsensor.analysis.ReferenceEventAnalysisEngine" />
    <config:attack-analyzer class="org.owasp.appsensor.analysis.ReferenceAttackAnalysisEngine" />
    <config:response-analyzer class="org.owasp.appsensor.analysis.ReferenceResponseAnalysisEngine" />
    <config:event-store class="org.owasp.appsensor.storage.InMemoryEventStore" />
    <config:attack-store class="org.owasp.appsensor.storage.InMemoryAttackStore" />
    <config:response-store class="org.owasp.appsensor.storage.InMemoryResponseStore" />
    <config:logger class="org.owasp.appsensor.logging.Slf4jLogger" />
    <config:response-handler class="  org.owasp.appsensor.handler.LocalResponseHandler  " />
    <config:event-store-observers>
        <config:observer class="org.owasp.appsensor.analysis.ReferenceEventAnalysisEngine" />
    </config:event-store-observers>
    <config:attack-store-observers>
        <config:observer class="org.owasp.appsensor.analysis.ReferenceAttackAnalysisEngine" />
        <config:observer class="org.owasp.appsensor.reporting.SimpleLoggingReportingEngine" />
    </config:attack-store-observers>
    <config:response-store-observers>
        <config:observer class="org.owasp.appsensor.analysis.ReferenceResponseAnalysisEngine" />
    </config:response-store-observers>
    <config:detection-point>
        <config:id>IE1</config:id>
        <config:threshold>
            <config:count>3</config:count>
            <config:interval unit="minutes">5</config:interval>
        </config:threshold>
        <config:response>
            <config:action>log</config:action>
        </config:response>
        <config:response>
            <config:action>disableUser</config:action>
            <config:interval unit="minutes">30</config:interval>
        </config:response>
    </config:detection-point>
    <config:detection-point>
        <config:id>IE2</config:id>
        <config:threshold>
            <config:count>12</config:count>
            <config:interval unit="seconds">60</config:interval>
        </config:threshold>
    </config:detection-point>
</config:appsensor-server-config>
"""


@pytest.fixture
def full_config_xml() -> str:
    return FULL_CONFIG_XML


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "appsensor-server-config.xml"
    path.write_text(FULL_CONFIG_XML, encoding="utf-8")
    return path


@pytest.fixture
def wrap_config():
    """Wrap a body in a root element declaring the configuration namespace."""

    def wrap(body: str) -> str:
        return (
            f'<config:appsensor-server-config xmlns:config="{CONFIG_NAMESPACE}">'
            f"{body}</config:appsensor-server-config>"
        )

    return wrap
