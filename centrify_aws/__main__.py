#!/usr/bin/env python3
# ABOUTME: Module entry point so the tool runs as python -m centrify_aws
# ABOUTME: Delegates to the cleo application

from centrify_aws.cli import main

if __name__ == "__main__":
    main()
