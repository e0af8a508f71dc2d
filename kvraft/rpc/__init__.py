"""A small TCP RPC layer: config file reader, call controller, framed client channel and service registry."""