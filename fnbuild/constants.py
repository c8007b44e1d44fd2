"""
Constants for the fnbuild function compiler.
"""

# Runtime the managed Go loader understands
GO_RUNTIME = "go1.x"

# Provided (bare-metal) runtimes. The loader for these looks for a file called
# `bootstrap` inside the deployment archive. Keep this list current with the
# provider's runtime catalogue.
PROVIDED_RUNTIMES = [
    "provided",
    "provided.al2",
    "provided.al2023",
]

BOOTSTRAP_NAME = "bootstrap"
BOOTSTRAP_MODE = 0o755

ARCHIVE_SUFFIX = ".zip"

# Handlers ending with one of these are treated as files, anything else as a package directory
SOURCE_SUFFIXES = (".go",)

CGO_ENV_VAR = "CGO_ENABLED"

DEFAULT_BASE_DIR = "."
DEFAULT_BIN_DIR = ".bin"
DEFAULT_CMD = 'GOOS=linux go build -ldflags="-s -w"'
ARM64_CMD = 'GOOS=linux GOARCH=arm64 go build -ldflags="-s -w"'
ARM64_ARCHITECTURE = "arm64"

# Key under `custom` that holds the build configuration
DEFAULT_CUSTOM_KEY = "go"
DEFAULT_MANIFEST = "serverless.yml"

# Lifecycle trigger points
HOOK_PACKAGE_ALL = "before:package:createDeploymentArtifacts"
HOOK_PACKAGE_FUNCTION = "before:deploy:function:packageFunction"
HOOK_INVOKE_LOCAL = "before:invoke:local:invoke"
HOOK_BUILD_COMMAND = "go:build:build"
