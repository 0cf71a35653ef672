#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import raises

from arm_composex.common.secure_parameters import SecureParameter
from arm_composex.container_group.container_group_config import (
    ContainerGroupConfig,
    ContainerInstanceConfig,
    EnvVar,
    InitContainerConfig,
    ProbeConfig,
    RegistryCredential,
    SecretVolume,
    azure_file,
    empty_dir,
    git_repo,
    secret_parameter,
    secret_string,
)
from arm_composex.container_group.container_group_params import (
    CONTAINER_GROUP_TYPE,
    RESTART_ON_FAILURE,
    WINDOWS,
)
from arm_composex.container_group.container_group_template import (
    container_group_dependencies,
    expand_container_group,
)
from arm_composex.identity.identity_config import UserAssignedIdentity
from arm_composex.storage.storage_params import STORAGE_ACCOUNT_TYPE


def render(config: ContainerGroupConfig) -> dict:
    resources = expand_container_group(config, "westeurope")
    assert len(resources) == 1
    return resources[0].to_dict()


def test_render_nginx_group():
    nginx = (
        ContainerInstanceConfig("nginx", image="nginx:1.17.6-alpine", memory_in_gb=0.5)
        .add_public_ports([80, 443])
        .add_internal_ports([9090])
    )
    group = render(ContainerGroupConfig("appWithHttpFrontend", instances=(nginx,)))
    assert group["type"] == CONTAINER_GROUP_TYPE
    assert group["name"] == "appWithHttpFrontend"
    assert group["location"] == "westeurope"
    assert group["dependsOn"] == []
    assert "identity" not in group
    properties = group["properties"]
    assert properties["osType"] == "Linux"
    assert properties["restartPolicy"] == "Always"
    assert properties["ipAddress"] == {
        "type": "Public",
        "ports": [{"protocol": "TCP", "port": 80}, {"protocol": "TCP", "port": 443}],
    }
    assert properties["containers"] == [
        {
            "name": "nginx",
            "properties": {
                "image": "nginx:1.17.6-alpine",
                "ports": [{"port": 80}, {"port": 443}, {"port": 9090}],
                "resources": {"requests": {"cpu": 1.0, "memoryInGB": 0.5}},
            },
        }
    ]


def test_group_udp_port_between_container_ports():
    nginx = ContainerInstanceConfig("nginx", image="nginx:1.17.6-alpine").add_public_ports(
        [80, 443]
    )
    group = ContainerGroupConfig("appWithHttpFrontend", instances=(nginx,)).add_udp_port(123)
    ports = render(group)["properties"]["ipAddress"]["ports"]
    assert ports == [
        {"protocol": "TCP", "port": 80},
        {"protocol": "UDP", "port": 123},
        {"protocol": "TCP", "port": 443},
    ]
    assert ports[1]["port"] == 123


def test_no_public_ip_block():
    container = ContainerInstanceConfig("ntp").add_public_ports([123]).add_internal_ports([123])
    properties = render(ContainerGroupConfig("ntp", instances=(container,)))["properties"]
    assert "ipAddress" not in properties
    assert properties["containers"][0]["properties"]["ports"] == [{"port": 123}]


def test_container_names_lower_case():
    group = render(
        ContainerGroupConfig(
            "group",
            instances=(ContainerInstanceConfig("fsharpApp", image="myapp:1.7.2"),),
        )
    )
    assert group["properties"]["containers"][0]["name"] == "fsharpapp"


def test_duplicate_container_names():
    group = ContainerGroupConfig(
        "group",
        instances=(ContainerInstanceConfig("app"), ContainerInstanceConfig("App")),
    )
    with raises(ValueError):
        render(group)


def test_duplicate_volume_names():
    group = ContainerGroupConfig(
        "group",
        instances=(ContainerInstanceConfig("app"),),
        volumes=(empty_dir("data"), empty_dir("data")),
    )
    with raises(ValueError):
        render(group)


def test_group_settings():
    group = ContainerGroupConfig(
        "group",
        operating_system=WINDOWS,
        restart_policy=RESTART_ON_FAILURE,
        instances=(ContainerInstanceConfig("app").add_public_ports([80]),),
        dns_name_label="myapp",
    )
    properties = render(group)["properties"]
    assert properties["osType"] == "Windows"
    assert properties["restartPolicy"] == "OnFailure"
    assert properties["ipAddress"]["dnsNameLabel"] == "myapp"
    with raises(ValueError):
        ContainerGroupConfig("group", operating_system="Solaris")
    with raises(ValueError):
        ContainerGroupConfig("group", restart_policy="Sometimes")


def test_env_vars():
    container = ContainerInstanceConfig(
        "app",
        env_vars=(
            ("testing", "environment variables"),
            EnvVar.create("count", 3),
            EnvVar.create_secure("password", "secret-password"),
        ),
    )
    group_config = ContainerGroupConfig("group", instances=(container,))
    properties = render(group_config)["properties"]
    assert properties["containers"][0]["properties"]["environmentVariables"] == [
        {"name": "testing", "value": "environment variables"},
        {"name": "count", "value": "3"},
        {"name": "password", "secureValue": "[parameters('secret-password')]"},
    ]
    assert group_config.secure_parameters == (SecureParameter("secret-password"),)
    with raises(ValueError):
        EnvVar("empty")
    with raises(TypeError):
        ContainerInstanceConfig("app", env_vars=(["a", "b", "c"],))


def test_command_and_resources():
    container = ContainerInstanceConfig("app", cpu_cores=2, memory_in_gb=3).with_command(
        ["/bin/sh", "-c", "sleep 3600"]
    )
    properties = render(ContainerGroupConfig("group", instances=(container,)))["properties"]
    container_properties = properties["containers"][0]["properties"]
    assert container_properties["command"] == ["/bin/sh", "-c", "sleep 3600"]
    assert container_properties["resources"] == {"requests": {"cpu": 2.0, "memoryInGB": 3.0}}
    with raises(ValueError):
        ContainerInstanceConfig("app", cpu_cores=-1)
    with raises(TypeError):
        ContainerInstanceConfig("app", memory_in_gb="1.5")


def test_http_probe():
    probe = ProbeConfig.http(
        "https://whatever.com:8080/healthcheck", period_seconds=30, failure_threshold=10
    )
    assert probe.port == 8080
    assert probe.path == "/healthcheck"
    assert probe.protocol == "http"
    container = ContainerInstanceConfig("app").with_probes(liveness=probe)
    properties = render(ContainerGroupConfig("group", instances=(container,)))["properties"]
    container_properties = properties["containers"][0]["properties"]
    assert container_properties["livenessProbe"] == {
        "httpGet": {"path": "/healthcheck", "port": 8080, "scheme": "https"},
        "periodSeconds": 30,
        "failureThreshold": 10,
    }
    assert "readinessProbe" not in container_properties


def test_http_probe_default_port():
    assert ProbeConfig.http("http://localhost").port == 80
    assert ProbeConfig.http("http://localhost").path == "/"
    assert ProbeConfig.http("https://localhost/ready").port == 443
    with raises(ValueError):
        ProbeConfig.http("ftp://localhost/ready")


def test_exec_probe():
    probe = ProbeConfig.exec(["cat", "/tmp/healthy"], initial_delay_seconds=5)
    assert probe.protocol == "exec"
    container = ContainerInstanceConfig("app").with_probes(readiness=probe)
    properties = render(ContainerGroupConfig("group", instances=(container,)))["properties"]
    assert properties["containers"][0]["properties"]["readinessProbe"] == {
        "exec": {"command": ["cat", "/tmp/healthy"]},
        "initialDelaySeconds": 5,
    }


def test_invalid_probes():
    with raises(ValueError):
        ProbeConfig()
    with raises(ValueError):
        ProbeConfig(port=80, command=("true",))
    with raises(ValueError):
        ProbeConfig.exec(["true"], period_seconds=-1)


def test_init_containers():
    init = InitContainerConfig(
        "Init",
        image="busybox",
        command=("echo", "hello"),
        volume_mounts=(("emptyDir1", "/mnt/emptydir"),),
    )
    group = ContainerGroupConfig(
        "group",
        instances=(ContainerInstanceConfig("app", image="nginx"),),
        init_containers=(init,),
        volumes=(empty_dir("emptyDir1"),),
    )
    properties = render(group)["properties"]
    assert properties["initContainers"] == [
        {
            "name": "init",
            "properties": {
                "image": "busybox",
                "command": ["echo", "hello"],
                "volumeMounts": [{"name": "emptyDir1", "mountPath": "/mnt/emptydir"}],
            },
        }
    ]


def test_volumes():
    group = ContainerGroupConfig(
        "group",
        instances=(
            ContainerInstanceConfig("app")
            .add_volume_mount("azure-file", "/var/lib/files")
            .add_volume_mount("secrets", "/config/secrets"),
        ),
        volumes=(
            azure_file("azure-file", "fileShare1", "storageaccount1"),
            SecretVolume(
                "secrets",
                (("secret1", "abcdefg"), ("secret2", SecureParameter("secret-foo"))),
            ),
            empty_dir("shared"),
            git_repo("source", "https://github.com/CompositionalIT/farmer", revision="master"),
        ),
    )
    properties = render(group)["properties"]
    assert properties["volumes"] == [
        {
            "name": "azure-file",
            "azureFile": {
                "shareName": "fileShare1",
                "storageAccountName": "storageaccount1",
                "storageAccountKey": "[listKeys(resourceId('Microsoft.Storage/storageAccounts', "
                "'storageaccount1'), '2018-07-01').keys[0].value]",
            },
        },
        {
            "name": "secrets",
            "secret": {
                "secret1": "YWJjZGVmZw==",
                "secret2": "[parameters('secret-foo')]",
            },
        },
        {"name": "shared", "emptyDir": {}},
        {
            "name": "source",
            "gitRepo": {
                "repository": "https://github.com/CompositionalIT/farmer",
                "revision": "master",
            },
        },
    ]
    assert properties["containers"][0]["properties"]["volumeMounts"] == [
        {"name": "azure-file", "mountPath": "/var/lib/files"},
        {"name": "secrets", "mountPath": "/config/secrets"},
    ]
    assert group.secure_parameters == (SecureParameter("secret-foo"),)


def test_volume_factories():
    assert secret_string("secrets", "file", "value").files == (("file", "value"),)
    assert secret_parameter("secrets", "file", "param").secure_parameters == (
        SecureParameter("param"),
    )
    with raises(ValueError):
        git_repo("source", "not-a-uri")
    with raises(TypeError):
        SecretVolume("secrets", (("file", 42),))
    with raises(TypeError):
        ContainerGroupConfig("group", volumes=("data",))


def test_registry_credentials():
    group = ContainerGroupConfig("group", instances=(ContainerInstanceConfig("app"),))
    group = group.add_registry_credentials(
        [RegistryCredential("my-registry.azurecr.io", "user")]
    )
    properties = render(group)["properties"]
    assert properties["imageRegistryCredentials"] == [
        {
            "server": "my-registry.azurecr.io",
            "username": "user",
            "password": "[parameters('my-registry.azurecr.io-password')]",
        }
    ]
    assert group.secure_parameters == (SecureParameter("my-registry.azurecr.io-password"),)


def test_secure_parameters_order_and_dedup():
    container = ContainerInstanceConfig(
        "app",
        env_vars=(
            EnvVar.create_secure("password", "shared-secret"),
            EnvVar.create_secure("other", "other-secret"),
        ),
    )
    group = ContainerGroupConfig(
        "group",
        instances=(container,),
        volumes=(secret_parameter("secrets", "file", "shared-secret"),),
        registry_credentials=(RegistryCredential("docker.io", "user"),),
    )
    assert [parameter.name for parameter in group.secure_parameters] == [
        "docker.io-password",
        "shared-secret",
        "other-secret",
    ]


def test_system_identity():
    group = ContainerGroupConfig(
        "group", instances=(ContainerInstanceConfig("app"),)
    ).with_system_identity()
    assert render(group)["identity"] == {"type": "SystemAssigned"}


def test_user_and_system_identities():
    group = (
        ContainerGroupConfig("group", instances=(ContainerInstanceConfig("app"),))
        .add_identity("aciUser")
        .add_identity(UserAssignedIdentity("shared-identity", "identities-rg"))
        .add_identity("aciUser")
        .with_system_identity()
    )
    assert render(group)["identity"] == {
        "type": "SystemAssigned, UserAssigned",
        "userAssignedIdentities": {
            "[resourceId('Microsoft.ManagedIdentity/userAssignedIdentities', 'aciUser')]": {},
            "[resourceId('identities-rg', 'Microsoft.ManagedIdentity/userAssignedIdentities', "
            "'shared-identity')]": {},
        },
    }
    dependencies = container_group_dependencies(group)
    assert len(dependencies) == 2
    assert not dependencies[0].linked
    assert dependencies[1].linked


def test_azure_file_storage_dependency():
    group = ContainerGroupConfig(
        "group",
        instances=(ContainerInstanceConfig("app"),),
        volumes=(azure_file("files", "share", "storageaccount1"), empty_dir("tmp")),
    )
    dependencies = container_group_dependencies(group)
    assert len(dependencies) == 1
    assert dependencies[0].resource_type == STORAGE_ACCOUNT_TYPE
    assert dependencies[0].name == "storageaccount1"
