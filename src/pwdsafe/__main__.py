from pwdsafe.PwdSafe_CLI import run

run()
