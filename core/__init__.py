# core package: configuration, logging, account registry and the GHL API client
